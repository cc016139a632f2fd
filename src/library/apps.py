'''
Config for library app
'''

from django.apps import AppConfig

class LibraryConfig(AppConfig):
    """Seed music tables and the table backend"""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'library'
