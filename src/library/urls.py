'''
Urls for the table API
'''

from django.urls import path
from . import views

app_name = 'library'

urlpatterns = [
    path('', views.table_rows, name='table-rows'),
    path('tables/', views.list_tables, name='tables'),
]
