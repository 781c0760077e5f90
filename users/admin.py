# ==================== USERS/ADMIN.PY ====================
from django.contrib import admin
from .models import CustomUser, EmailOTP, ContactMessage

@admin.register(CustomUser)
class CustomUserAdmin(admin.ModelAdmin):
    list_display = ['email', 'name', 'phone_number', 'role', 'is_staff', 'created_at']
    list_filter = ['role', 'gender', 'is_staff', 'created_at']
    search_fields = ['email', 'name', 'phone_number']
    readonly_fields = ['created_at', 'updated_at', 'last_login']
    exclude = ['password']


@admin.register(EmailOTP)
class EmailOTPAdmin(admin.ModelAdmin):
    list_display = ['email', 'verified', 'expires_at', 'created_at']
    list_filter = ['verified']
    search_fields = ['email']
    readonly_fields = ['otp_hash', 'created_at']


@admin.register(ContactMessage)
class ContactMessageAdmin(admin.ModelAdmin):
    list_display = ['subject', 'name', 'email', 'created_at']
    search_fields = ['subject', 'name', 'email']
    readonly_fields = ['created_at']
