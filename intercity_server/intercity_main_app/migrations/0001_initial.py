import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='TransportCompany',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('company_name', models.CharField(max_length=200)),
                ('company_logo', models.URLField(blank=True, max_length=300, null=True)),
                ('rc_number', models.CharField(max_length=50, unique=True)),
                ('contact_email', models.EmailField(max_length=254)),
                ('contact_phone', models.CharField(max_length=20)),
                ('is_verified', models.BooleanField(default=False)),
                ('is_active', models.BooleanField(default=True)),
                ('total_bookings', models.PositiveIntegerField(default=0)),
                ('rating', models.DecimalField(decimal_places=2, default=0.0, max_digits=3)),
                ('total_reviews', models.IntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('platform_user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='transport_company', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name_plural': 'transport companies',
            },
        ),
        migrations.CreateModel(
            name='Route',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('route_name', models.CharField(max_length=150)),
                ('departure_state', models.CharField(max_length=50)),
                ('departure_city', models.CharField(max_length=100)),
                ('departure_terminal', models.CharField(default='Main Terminal', max_length=150)),
                ('arrival_state', models.CharField(max_length=50)),
                ('arrival_city', models.CharField(max_length=100)),
                ('arrival_terminal', models.CharField(default='Main Terminal', max_length=150)),
                ('estimated_duration_minutes', models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(30), django.core.validators.MaxValueValidator(1440)])),
                ('estimated_distance_km', models.PositiveIntegerField(blank=True, null=True)),
                ('vehicle_type', models.CharField(default='bus', max_length=50)),
                ('amenities', models.JSONField(blank=True, default=list)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('company', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='routes', to='intercity_main_app.transportcompany')),
            ],
            options={
                'indexes': [models.Index(fields=['departure_state', 'arrival_state', 'is_active'], name='route_states_active_idx')],
            },
        ),
        migrations.CreateModel(
            name='ScheduledDeparture',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('schedule_code', models.CharField(blank=True, max_length=32, unique=True)),
                ('departure_at', models.DateTimeField(db_index=True)),
                ('estimated_arrival_at', models.DateTimeField(blank=True, null=True)),
                ('total_seats', models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(100)])),
                ('booked_seats', models.PositiveIntegerField(default=0)),
                ('available_seats', models.PositiveIntegerField()),
                ('price_per_seat', models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1000), django.core.validators.MaxValueValidator(5000000)])),
                ('vehicle_number', models.CharField(blank=True, default='', max_length=20)),
                ('driver_name', models.CharField(blank=True, max_length=100, null=True)),
                ('driver_phone', models.CharField(blank=True, max_length=20, null=True)),
                ('boarding_point', models.CharField(blank=True, max_length=200, null=True)),
                ('notes', models.TextField(blank=True, null=True)),
                ('status', models.CharField(choices=[('scheduled', 'Scheduled'), ('boarding', 'Boarding'), ('departed', 'Departed'), ('arrived', 'Arrived'), ('cancelled', 'Cancelled'), ('delayed', 'Delayed')], default='scheduled', max_length=20)),
                ('cancellation_reason', models.CharField(blank=True, max_length=255, null=True)),
                ('delay_reason', models.CharField(blank=True, max_length=255, null=True)),
                ('delay_minutes', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('company', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='schedules', to='intercity_main_app.transportcompany')),
                ('last_updated_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('route', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='schedules', to='intercity_main_app.route')),
            ],
            options={
                'ordering': ['departure_at'],
                'indexes': [
                    models.Index(fields=['route', 'departure_at', 'status'], name='schedule_route_dep_status_idx'),
                    models.Index(fields=['company', 'departure_at'], name='schedule_company_dep_idx'),
                    models.Index(fields=['departure_at', 'status'], name='schedule_dep_status_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('booked_seats__gte', 0), ('booked_seats__lte', models.F('total_seats'))), name='schedule_booked_seats_within_total'),
                    models.CheckConstraint(condition=models.Q(('available_seats', models.F('total_seats') - models.F('booked_seats'))), name='schedule_available_seats_derived'),
                    models.CheckConstraint(condition=models.Q(('total_seats__gte', 1), ('total_seats__lte', 100)), name='schedule_total_seats_range'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Booking',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('booking_reference', models.CharField(max_length=40, unique=True)),
                ('passenger_full_name', models.CharField(max_length=150)),
                ('passenger_email', models.EmailField(max_length=254)),
                ('passenger_phone', models.CharField(max_length=20)),
                ('next_of_kin', models.JSONField(blank=True, null=True)),
                ('id_type', models.CharField(blank=True, choices=[('NIN', 'NIN'), ('Driver License', 'Driver License'), ('Voter Card', 'Voter Card'), ('International Passport', 'International Passport'), ('Other', 'Other')], max_length=30, null=True)),
                ('id_number', models.CharField(blank=True, max_length=50, null=True)),
                ('number_of_seats', models.PositiveSmallIntegerField()),
                ('seat_numbers', models.JSONField(blank=True, default=list)),
                ('special_requests', models.TextField(blank=True, null=True)),
                ('total_amount', models.PositiveIntegerField()),
                ('amount_paid', models.PositiveIntegerField(default=0)),
                ('payment_status', models.CharField(choices=[('pending', 'Pending'), ('partial', 'Partial'), ('paid', 'Paid'), ('refunded', 'Refunded'), ('failed', 'Failed')], default='pending', max_length=20)),
                ('payment_method', models.CharField(blank=True, choices=[('card', 'Card'), ('transfer', 'Bank Transfer'), ('wallet', 'Wallet'), ('cash', 'Cash')], max_length=20, null=True)),
                ('payment_reference', models.CharField(blank=True, max_length=100, null=True)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('confirmed', 'Confirmed'), ('checked_in', 'Checked In'), ('completed', 'Completed'), ('cancelled', 'Cancelled'), ('no_show', 'No Show'), ('refunded', 'Refunded')], default='confirmed', max_length=20)),
                ('booking_source', models.CharField(choices=[('web', 'Web'), ('mobile', 'Mobile App'), ('agent', 'Agent'), ('admin', 'Admin')], default='mobile', max_length=20)),
                ('cancellation_date', models.DateTimeField(blank=True, null=True)),
                ('cancellation_reason', models.CharField(blank=True, max_length=255, null=True)),
                ('checked_in_at', models.DateTimeField(blank=True, null=True)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('company', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='bookings', to='intercity_main_app.transportcompany')),
                ('route', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='bookings', to='intercity_main_app.route')),
                ('schedule', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='bookings', to='intercity_main_app.scheduleddeparture')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='intercity_bookings', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'indexes': [
                    models.Index(fields=['user', '-created_at'], name='booking_user_created_idx'),
                    models.Index(fields=['company', '-created_at'], name='booking_company_created_idx'),
                    models.Index(fields=['schedule', 'status'], name='booking_schedule_status_idx'),
                    models.Index(fields=['passenger_email'], name='booking_passenger_email_idx'),
                    models.Index(fields=['passenger_phone'], name='booking_passenger_phone_idx'),
                    models.Index(fields=['payment_status', 'status'], name='booking_payment_status_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('number_of_seats__gte', 1), ('number_of_seats__lte', 10)), name='booking_number_of_seats_range'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Notification',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('type', models.CharField(choices=[('booking_confirmed', 'Booking Confirmed'), ('booking_cancelled', 'Booking Cancelled')], max_length=40)),
                ('title', models.CharField(max_length=150)),
                ('body', models.TextField()),
                ('data', models.JSONField(blank=True, default=dict)),
                ('dedupe_key', models.CharField(max_length=80, unique=True)),
                ('read', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='intercity_notifications', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['user', '-created_at'], name='notification_user_created_idx')],
            },
        ),
    ]
