"""
pulsezen/migrations/0001_initial.py
Initial schema for accounts, devices, biometric tokens, trust scores,
auth logs and backup codes.
"""

import decimal
import uuid

import django.contrib.auth.models
import django.contrib.auth.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('auth', '0012_alter_user_first_name_max_length'),
    ]

    operations = [
        migrations.CreateModel(
            name='User',
            fields=[
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('last_login', models.DateTimeField(blank=True, null=True, verbose_name='last login')),
                ('is_superuser', models.BooleanField(default=False, help_text='Designates that this user has all permissions without explicitly assigning them.', verbose_name='superuser status')),
                ('username', models.CharField(error_messages={'unique': 'A user with that username already exists.'}, help_text='Required. 150 characters or fewer. Letters, digits and @/./+/-/_ only.', max_length=150, unique=True, validators=[django.contrib.auth.validators.UnicodeUsernameValidator()], verbose_name='username')),
                ('first_name', models.CharField(blank=True, max_length=150, verbose_name='first name')),
                ('last_name', models.CharField(blank=True, max_length=150, verbose_name='last name')),
                ('is_staff', models.BooleanField(default=False, help_text='Designates whether the user can log into this admin site.', verbose_name='staff status')),
                ('is_active', models.BooleanField(default=True, help_text='Designates whether this user should be treated as active. Unselect this instead of deleting accounts.', verbose_name='active')),
                ('date_joined', models.DateTimeField(default=django.utils.timezone.now, verbose_name='date joined')),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('email', models.EmailField(help_text='Login identifier, also stored in username.', max_length=254, unique=True)),
                ('email_verified', models.BooleanField(default=False, help_text='Whether the user confirmed ownership of the email address.')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('deleted_at', models.DateTimeField(blank=True, help_text='Set when the account was soft-deleted.', null=True)),
                ('groups', models.ManyToManyField(blank=True, help_text='The groups this user belongs to. A user will get all permissions granted to each of their groups.', related_name='user_set', related_query_name='user', to='auth.group', verbose_name='groups')),
                ('user_permissions', models.ManyToManyField(blank=True, help_text='Specific permissions for this user.', related_name='user_set', related_query_name='user', to='auth.permission', verbose_name='user permissions')),
            ],
            options={
                'db_table': 'users',
                'indexes': [models.Index(fields=['email_verified'], name='users_email_verified_idx')],
            },
            managers=[
                ('objects', django.contrib.auth.models.UserManager()),
            ],
        ),
        migrations.CreateModel(
            name='UserDevice',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('fingerprint', models.CharField(help_text='Stable device identifier computed by the mobile app', max_length=255, unique=True)),
                ('device_name', models.CharField(max_length=100)),
                ('device_type', models.CharField(choices=[('mobile', 'Mobile'), ('tablet', 'Tablet'), ('desktop', 'Desktop')], max_length=50)),
                ('platform', models.CharField(choices=[('ios', 'iOS'), ('android', 'Android'), ('web', 'Web')], max_length=50)),
                ('os_version', models.CharField(blank=True, max_length=50, null=True)),
                ('app_version', models.CharField(blank=True, max_length=50, null=True)),
                ('capabilities', models.JSONField(default=dict, help_text='hasBiometrics, biometricTypes, hasDevicePasscode, hasScreenLock, ...')),
                ('security_level', models.CharField(blank=True, choices=[('premium', 'Premium'), ('protected', 'Protected'), ('basic', 'Basic'), ('insecure', 'Insecure')], help_text='Derived from capabilities', max_length=20)),
                ('is_trusted', models.BooleanField(default=False)),
                ('biometric_enabled', models.BooleanField(default=False)),
                ('last_seen_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='devices', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'user_devices',
                'indexes': [
                    models.Index(fields=['security_level'], name='user_device_sec_level_idx'),
                    models.Index(fields=['is_trusted'], name='user_device_trusted_idx'),
                    models.Index(fields=['last_seen_at'], name='user_device_last_seen_idx'),
                    models.Index(fields=['fingerprint', 'biometric_enabled', 'user'], name='idx_device_auth_lookup'),
                ],
            },
        ),
        migrations.CreateModel(
            name='DeviceTrustScore',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('base_score', models.DecimalField(decimal_places=2, default=decimal.Decimal('50.00'), max_digits=5)),
                ('behavior_score', models.DecimalField(decimal_places=2, default=decimal.Decimal('50.00'), max_digits=5)),
                ('location_score', models.DecimalField(decimal_places=2, default=decimal.Decimal('50.00'), max_digits=5)),
                ('time_score', models.DecimalField(decimal_places=2, default=decimal.Decimal('50.00'), max_digits=5)),
                ('final_score', models.DecimalField(decimal_places=2, default=decimal.Decimal('50.00'), max_digits=5)),
                ('login_frequency', models.IntegerField(default=0)),
                ('successful_auths', models.IntegerField(default=0)),
                ('failed_auths', models.IntegerField(default=0)),
                ('location_history', models.JSONField(blank=True, help_text='Most recent login locations, newest last', null=True)),
                ('usage_patterns', models.JSONField(blank=True, help_text='dailyUsageHours, weeklyUsageDays, sessionDurations, featureUsage', null=True)),
                ('last_calculated_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('device', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='trust_score', to='pulsezen.userdevice')),
            ],
            options={
                'db_table': 'device_trust_scores',
                'indexes': [
                    models.Index(fields=['final_score'], name='trust_score_final_idx'),
                    models.Index(fields=['last_calculated_at'], name='trust_score_calc_at_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='BiometricToken',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('token_hash', models.CharField(help_text='Password-hasher digest of the raw token', max_length=255)),
                ('biometric_type', models.CharField(choices=[('faceId', 'Face ID'), ('touchId', 'Touch ID'), ('fingerprint', 'Fingerprint'), ('iris', 'Iris'), ('voice', 'Voice')], max_length=20)),
                ('biometric_data', models.JSONField(blank=True, help_text='templateHash, publicKey, challenge, signature, metadata', null=True)),
                ('challenge_attempts', models.IntegerField(default=0)),
                ('success_count', models.IntegerField(default=0)),
                ('last_used_at', models.DateTimeField(blank=True, null=True)),
                ('expires_at', models.DateTimeField(blank=True, null=True)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('device', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='biometric_tokens', to='pulsezen.userdevice')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='biometric_tokens', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'biometric_tokens',
                'indexes': [
                    models.Index(fields=['user', 'device'], name='bio_token_user_device_idx'),
                    models.Index(fields=['biometric_type'], name='bio_token_type_idx'),
                    models.Index(fields=['is_active'], name='bio_token_active_idx'),
                    models.Index(fields=['expires_at'], name='bio_token_expires_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='AuthLog',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('auth_method', models.CharField(choices=[('biometric', 'Biometric'), ('devicePin', 'Device PIN'), ('appPin', 'App PIN'), ('email', 'Email'), ('sms', 'SMS'), ('backupCode', 'Backup code')], max_length=20)),
                ('biometric_type', models.CharField(blank=True, max_length=20, null=True)),
                ('result', models.CharField(choices=[('success', 'Success'), ('failed', 'Failed'), ('fallback', 'Fallback'), ('blocked', 'Blocked')], max_length=20)),
                ('failure_reason', models.CharField(blank=True, max_length=100, null=True)),
                ('ip_address', models.CharField(blank=True, max_length=45, null=True)),
                ('user_agent', models.CharField(blank=True, max_length=500, null=True)),
                ('geolocation', models.JSONField(blank=True, null=True)),
                ('device_info', models.JSONField(blank=True, null=True)),
                ('trust_score_at_time', models.DecimalField(blank=True, decimal_places=2, max_digits=5, null=True)),
                ('response_time_ms', models.IntegerField(blank=True, null=True)),
                ('required_fallback', models.BooleanField(default=False)),
                ('attempted_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('device', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='auth_logs', to='pulsezen.userdevice')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='auth_logs', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'auth_logs',
                'ordering': ['-attempted_at'],
                'indexes': [
                    models.Index(fields=['user', 'attempted_at'], name='auth_log_user_attempt_idx'),
                    models.Index(fields=['auth_method'], name='auth_log_method_idx'),
                    models.Index(fields=['result'], name='auth_log_result_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='BackupCode',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('code_hash', models.CharField(max_length=255)),
                ('code_partial', models.CharField(help_text='First and last two characters, e.g. AB****YZ', max_length=10)),
                ('is_used', models.BooleanField(default=False)),
                ('used_at', models.DateTimeField(blank=True, null=True)),
                ('used_from_ip', models.CharField(blank=True, max_length=45, null=True)),
                ('expires_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='backup_codes', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'backup_codes',
                'indexes': [
                    models.Index(fields=['user', 'is_used'], name='backup_code_user_used_idx'),
                    models.Index(fields=['expires_at'], name='backup_code_expires_idx'),
                ],
            },
        ),
    ]
