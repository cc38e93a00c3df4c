from django.contrib import admin

# Customize admin site
admin.site.site_header = "Arunothai Garden Home - Rental Admin"
admin.site.site_title = "Rental Admin"
admin.site.index_title = "Apartments, tenants and rentals"
