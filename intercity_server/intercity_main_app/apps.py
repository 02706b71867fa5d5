from django.apps import AppConfig


class IntercityMainAppConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'intercity_main_app'

    def ready(self):
        import intercity_main_app.signals  # Register signals
