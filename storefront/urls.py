from django.urls import path

from . import views_stock

app_name = "storefront"

urlpatterns = [
    path("api/stock/", views_stock.check_stock, name="stock_check"),
]
