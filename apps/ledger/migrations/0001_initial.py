import django.db.models.deletion
from decimal import Decimal
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('farms', '0001_initial'),
        ('buyers', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Ledger',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('vehicle_number', models.CharField(max_length=20)),
                ('driver_name', models.CharField(max_length=100)),
                ('driver_contact', models.CharField(max_length=20)),
                ('accountant_name', models.CharField(max_length=100)),
                ('empty_vehicle_weight', models.DecimalField(decimal_places=2, max_digits=14)),
                ('gross_weight', models.DecimalField(decimal_places=2, max_digits=14)),
                ('net_weight', models.DecimalField(decimal_places=2, max_digits=14)),
                ('number_of_birds', models.PositiveIntegerField()),
                ('rate', models.DecimalField(decimal_places=2, help_text='Price per unit of net weight', max_digits=14)),
                ('total_amount', models.DecimalField(decimal_places=2, max_digits=14)),
                ('amount_paid', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=14)),
                ('date', models.DateTimeField(help_text='When the weighing/sale took place')),
                ('buyer', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='ledgers', to='buyers.buyer')),
                ('farm', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='ledgers', to='farms.farm')),
                ('flock', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='ledgers', to='farms.flock')),
                ('shed', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='ledgers', to='farms.shed')),
            ],
            options={
                'ordering': ['-date', '-id'],
                'indexes': [
                    models.Index(fields=['date'], name='ledger_date_idx'),
                    models.Index(fields=['buyer', '-date'], name='ledger_buyer_date_idx'),
                ],
            },
        ),
    ]
