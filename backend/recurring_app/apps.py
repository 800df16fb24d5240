from django.apps import AppConfig


class RecurringAppConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'recurring_app'
    verbose_name = 'Recurring activities'
