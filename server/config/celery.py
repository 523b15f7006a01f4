import os
from celery import Celery
from celery.schedules import crontab

# Set default Django settings
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

app = Celery('pulsezen')

# Load configuration from Django settings
app.config_from_object('django.conf:settings', namespace='CELERY')

# Auto-discover tasks from installed apps
app.autodiscover_tasks()

# Periodic tasks schedule
app.conf.beat_schedule = {
    'deactivate-expired-biometric-tokens': {
        'task': 'pulsezen.tasks.deactivate_expired_biometric_tokens',
        'schedule': crontab(minute=15),  # Hourly
    },
    'recalculate-trust-scores': {
        'task': 'pulsezen.tasks.recalculate_trust_scores',
        'schedule': crontab(hour=3, minute=0),  # Daily at 3 AM UTC
    },
}
