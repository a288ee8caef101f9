"""
Management command to create sample data for trying the API.

Usage:
    python manage.py create_sample_data [--clear]

This creates:
- Permissions, roles (including Tecnico) and areas
- 3 staff users (admin, tesorero, tecnico)
- 15 participants, some with installments and some fully paid
"""

from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.accounts.models import User, Role, Permission, Area, UserRole, UserArea
from apps.participants.models import Participant, Payment
from apps.participants.services import register_participant, register_payment


class Command(BaseCommand):
    help = 'Create sample data for trying the API'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear existing data before creating new sample data',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing existing data...')
            self.clear_data()

        self.stdout.write('Creating sample data...')

        roles, areas = self.create_roles_and_areas()
        users = self.create_users(roles, areas)
        self.create_participants(users['tesorero'])

        self.stdout.write(self.style.SUCCESS('Sample data created successfully!'))
        self.stdout.write('')
        self.stdout.write('Test accounts:')
        self.stdout.write('  admin@example.com / admin123 (superuser)')
        self.stdout.write('  tesorero@example.com / password123')
        self.stdout.write('  tecnico@example.com / password123')

    def clear_data(self):
        """Clear all data from the database."""
        Payment.objects.all().delete()
        Participant.objects.all().delete()
        UserRole.objects.all().delete()
        UserArea.objects.all().delete()
        User.objects.filter(is_superuser=False).delete()
        User.objects.filter(email='admin@example.com').delete()
        Role.objects.all().delete()
        Area.objects.all().delete()
        Permission.objects.all().delete()

    def create_roles_and_areas(self):
        self.stdout.write('  Creating roles and areas...')

        permisos = {}
        for nombre in ['ver_participantes', 'registrar_pagos', 'administrar_usuarios']:
            permisos[nombre], _ = Permission.objects.get_or_create(nombre=nombre)

        role_data = {
            'Administrador': list(permisos),
            'Tesorero': ['ver_participantes', 'registrar_pagos'],
            Role.TECNICO: ['ver_participantes'],
        }
        roles = {}
        for nombre, permission_names in role_data.items():
            role, _ = Role.objects.get_or_create(nombre=nombre)
            role.permisos.set([permisos[name] for name in permission_names])
            roles[nombre] = role

        areas = {}
        for nombre in ['Sistemas', 'Finanzas', 'Logística']:
            areas[nombre], _ = Area.objects.get_or_create(nombre=nombre)

        return roles, areas

    def create_users(self, roles, areas):
        """Create test users with role and area assignments."""
        self.stdout.write('  Creating users...')

        user_data = [
            ('admin', 'admin@example.com', 'admin123', 'Administrador', 'Sistemas',
             {'is_staff': True, 'is_superuser': True, 'rol': 'admin'}),
            ('tesorero', 'tesorero@example.com', 'password123', 'Tesorero', 'Finanzas', {}),
            ('tecnico', 'tecnico@example.com', 'password123', Role.TECNICO, 'Logística',
             {'rol': 'tecnico'}),
        ]

        users = {}
        for key, email, password, role_name, area_name, extra in user_data:
            user, _ = User.objects.get_or_create(
                email=email,
                defaults={
                    'nombre': key.capitalize(),
                    'apellido': 'Demo',
                    'usuario': key,
                    **extra,
                }
            )
            user.set_password(password)
            user.save()
            UserRole.objects.get_or_create(user=user, role=roles[role_name])
            UserArea.objects.get_or_create(user=user, area=areas[area_name])
            users[key] = user

        return users

    def create_participants(self, owner):
        """Create participants through the services so balances stay consistent."""
        self.stdout.write('  Creating participants...')

        carreras = ['Ingeniería de Sistemas', 'Medicina', 'Derecho']
        created = 0
        for i in range(15):
            ci = f'{9000000 + i}'
            if Participant.objects.filter(ci=ci).exists():
                continue

            participant, _ = register_participant(
                nombres=f'Participante {i + 1}',
                apellidos='Ejemplo',
                carrera=carreras[i % len(carreras)],
                ci=ci,
                celular=f'7000{i:04d}',
                monto_inicial=Decimal('100') if i % 2 == 0 else Decimal('0'),
                usuario_id=owner.id,
            )
            if i % 5 == 0:
                register_payment(
                    participant_id=participant.id,
                    monto=Decimal('220'),
                    observacion='Pago final',
                )
            created += 1

        self.stdout.write(f'    {created} participant(s) created')
