import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='ControlItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('key', models.CharField(max_length=100)),
                ('value', models.CharField(max_length=500)),
                ('type', models.CharField(choices=[('general', 'General Setting'), ('parking-slot', 'Parking Slot')], db_index=True, max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'ordering': ['type', 'key'],
            },
        ),
        migrations.CreateModel(
            name='ParkingRequest',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('depart_time_from_home', models.TimeField()),
                ('departure_time_from_office', models.TimeField()),
                ('carpool_offer', models.BooleanField(default=False)),
                ('seats_available', models.PositiveIntegerField(default=0)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('approved', 'Approved'), ('rejected', 'Rejected')], db_index=True, default='pending', max_length=20)),
                ('slot_number', models.CharField(blank=True, max_length=50)),
                ('start_latitude', models.FloatField(blank=True, null=True)),
                ('start_longitude', models.FloatField(blank=True, null=True)),
                ('start_address', models.CharField(blank=True, max_length=500)),
                ('end_latitude', models.FloatField(blank=True, null=True)),
                ('end_longitude', models.FloatField(blank=True, null=True)),
                ('end_address', models.CharField(blank=True, max_length=500)),
                ('route', models.JSONField(blank=True, default=list)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='parking_requests', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at'],
            },
        ),
        migrations.AddIndex(
            model_name='parkingrequest',
            index=models.Index(fields=['status', 'carpool_offer'], name='parking_status_offer_idx'),
        ),
        migrations.AddConstraint(
            model_name='parkingrequest',
            constraint=models.UniqueConstraint(fields=('user',), name='one_parking_request_per_user'),
        ),
        migrations.AddConstraint(
            model_name='controlitem',
            constraint=models.UniqueConstraint(fields=('key', 'type'), name='unique_control_item_key_per_type'),
        ),
    ]
