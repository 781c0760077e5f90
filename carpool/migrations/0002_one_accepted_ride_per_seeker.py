from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('carpool', '0001_initial'),
    ]

    operations = [
        migrations.AddConstraint(
            model_name='riderequest',
            constraint=models.UniqueConstraint(
                condition=models.Q(status='accepted'),
                fields=('seeker',),
                name='one_accepted_ride_per_seeker',
            ),
        ),
    ]
