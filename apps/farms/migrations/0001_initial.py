import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Farm',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(help_text='Farm name (unique)', max_length=255, unique=True)),
                ('supervisor', models.CharField(max_length=255)),
                ('total_sheds', models.PositiveIntegerField(default=0, help_text='Number of sheds the farm can house')),
            ],
            options={
                'ordering': ['name'],
                'indexes': [models.Index(fields=['created_at'], name='farm_created_at_idx')],
            },
        ),
        migrations.CreateModel(
            name='Flock',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(help_text='Batch number', max_length=255)),
                ('status', models.CharField(choices=[('active', 'Active'), ('completed', 'Completed')], default='active', max_length=20)),
                ('start_date', models.DateField()),
                ('end_date', models.DateField(blank=True, null=True)),
                ('farm', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='flocks', to='farms.farm')),
            ],
            options={
                'ordering': ['-start_date', 'name'],
                'indexes': [
                    models.Index(fields=['farm'], name='flock_farm_idx'),
                    models.Index(fields=['status'], name='flock_status_idx'),
                    models.Index(fields=['start_date'], name='flock_start_date_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Shed',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(help_text='e.g. Shed-1', max_length=100)),
                ('total_chicks', models.PositiveIntegerField(default=0)),
                ('flock', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='sheds', to='farms.flock')),
            ],
            options={
                'ordering': ['name'],
                'unique_together': {('flock', 'name')},
            },
        ),
    ]
