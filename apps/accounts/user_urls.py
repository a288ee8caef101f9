from django.urls import path
from . import views

app_name = 'users'

urlpatterns = [
    path('', views.user_list, name='user-list'),
    path('tecnicos', views.technicians, name='technicians'),
    path('count', views.user_count, name='user-count'),
    path('role/<int:role_id>', views.users_by_role, name='users-by-role'),
    path('name/<int:pk>', views.user_full_name, name='user-full-name'),
    path('equipos/<int:pk>', views.user_teams, name='user-teams'),
    path('<int:pk>', views.user_detail, name='user-detail'),
]
