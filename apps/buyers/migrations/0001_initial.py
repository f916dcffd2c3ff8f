from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Buyer',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(max_length=255)),
                ('contact_number', models.CharField(help_text='Phone number (unique per buyer)', max_length=20, unique=True)),
                ('address', models.CharField(blank=True, max_length=500)),
            ],
            options={
                'ordering': ['name'],
                'indexes': [models.Index(fields=['name'], name='buyer_name_idx')],
            },
        ),
    ]
