# Generated manually for the participants app

from decimal import Decimal
from django.conf import settings
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Participant',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('nombres', models.CharField(max_length=100)),
                ('apellidos', models.CharField(max_length=100)),
                ('carrera', models.CharField(max_length=150)),
                ('ci', models.CharField(max_length=20, unique=True)),
                ('celular', models.CharField(max_length=20)),
                ('tipo_pago', models.CharField(default='cuotas', max_length=20)),
                ('monto_total', models.DecimalField(decimal_places=2, default=Decimal('320.00'), editable=False, max_digits=10)),
                ('monto_pagado', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('estado', models.CharField(choices=[('pendiente', 'Pendiente'), ('completado', 'Completado')], default='pendiente', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('usuario', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='participantes', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'participantes',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['estado'], name='participantes_estado_idx'),
                    models.Index(fields=['carrera'], name='participantes_carrera_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Payment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('monto', models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.01'))])),
                ('metodo_pago', models.CharField(default='efectivo', max_length=50)),
                ('observacion', models.TextField(blank=True, null=True)),
                ('fecha', models.DateTimeField(auto_now_add=True)),
                ('participante', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='pagos', to='participants.participant')),
            ],
            options={
                'db_table': 'pagos',
                'ordering': ['-fecha', '-id'],
                'indexes': [
                    models.Index(fields=['participante', 'fecha'], name='pagos_participante_fecha_idx'),
                ],
            },
        ),
    ]
