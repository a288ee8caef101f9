from django.urls import path
from . import views

app_name = 'participants'

urlpatterns = [
    # GET    /api/participantes/                       - List participants
    # POST   /api/participantes/register               - Register participant
    # GET    /api/participantes/resumen                - Collection statistics
    # GET    /api/participantes/{id}                   - Participant detail
    # PUT    /api/participantes/{id}                   - Update participant
    # DELETE /api/participantes/{id}                   - Delete participant
    # GET    /api/participantes/{id}/pagos             - List payments
    # POST   /api/participantes/{id}/pagos             - Register payment
    # PUT    /api/participantes/{id}/pagos/{pagoId}    - Update payment
    # DELETE /api/participantes/{id}/pagos/{pagoId}    - Delete payment
    path('', views.participant_list, name='participant-list'),
    path('register', views.participant_register, name='participant-register'),
    path('resumen', views.payment_summary, name='payment-summary'),
    path('<int:pk>', views.participant_detail, name='participant-detail'),
    path('<int:pk>/pagos', views.participant_payments, name='participant-payments'),
    path('<int:pk>/pagos/<int:pago_id>', views.payment_detail, name='payment-detail'),
]
