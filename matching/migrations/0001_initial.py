import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('bloodrequests', '0001_initial'),
        ('donors', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='DonationMatch',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('status', models.CharField(choices=[('Pending', 'Pending'), ('Accepted', 'Accepted'), ('Declined', 'Declined'), ('Completed', 'Donation Completed'), ('Cancelled', 'Cancelled')], default='Pending', max_length=10)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('response_time', models.DateTimeField(blank=True, null=True)),
                ('donation_time', models.DateTimeField(blank=True, null=True)),
                ('notes', models.TextField(blank=True, null=True)),
                ('distance_km', models.FloatField(blank=True, help_text='Distance reported by the donor search', null=True)),
                ('donor', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='matches', to='donors.donorprofile')),
                ('request', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='matches', to='bloodrequests.bloodrequest')),
            ],
            options={
                'verbose_name': 'Donation Match',
                'verbose_name_plural': 'Donation Matches',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['request', 'status'], name='match_request_status_idx'),
                    models.Index(fields=['donor', '-created_at'], name='match_donor_created_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('status__in', ['Pending', 'Accepted'])), fields=('request', 'donor'), name='unique_live_match_per_donor'),
                ],
            },
        ),
    ]
