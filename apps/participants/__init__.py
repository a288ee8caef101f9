"""
Participants App - Event participants and installment payments

Each participant owes a fixed event fee (320) and pays it in one or more
installments. The paid aggregate and the derived status are kept
consistent with the payment rows by the services in this app.

Architecture:
- Models: Participant, Payment
- Services: participant_management, payment_management, payment_summary
- Views: function views under /api/participantes/
- Exceptions: ParticipantsServiceError hierarchy
"""
