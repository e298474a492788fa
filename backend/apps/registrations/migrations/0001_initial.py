import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models

REVIEW_STATUS_CHOICES = [("pending", "Pending"), ("approved", "Approved"), ("rejected", "Rejected")]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("events", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="VendorProfile",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("full_name", models.CharField(max_length=200)),
                ("business_name", models.CharField(max_length=200)),
                ("business_address", models.CharField(max_length=255)),
                ("business_address_line2", models.CharField(blank=True, default="", max_length=255)),
                ("city", models.CharField(max_length=100)),
                ("state", models.CharField(max_length=100)),
                ("zip_code", models.CharField(max_length=20)),
                ("phone_number", models.CharField(max_length=50)),
                ("email", models.EmailField(max_length=254)),
                ("website_url", models.URLField(blank=True, default="")),
                ("facebook_url", models.URLField(blank=True, default="")),
                ("instagram_url", models.URLField(blank=True, default="")),
                ("tiktok_url", models.URLField(blank=True, default="")),
                ("other_promo_url", models.URLField(blank=True, default="")),
                ("products_description", models.TextField()),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("user", models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name="vendor_profile", to=settings.AUTH_USER_MODEL)),
            ],
        ),
        migrations.CreateModel(
            name="VolunteerProfile",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("full_name", models.CharField(max_length=200)),
                ("email", models.EmailField(max_length=254)),
                ("phone_number", models.CharField(max_length=50)),
                ("age", models.PositiveSmallIntegerField()),
                ("experience", models.TextField(blank=True, default="")),
                ("interests", models.TextField(blank=True, default="")),
                ("availability", models.CharField(max_length=100)),
                ("emergency_contact_name", models.CharField(max_length=200)),
                ("emergency_contact_phone", models.CharField(max_length=50)),
                ("tshirt_size", models.CharField(max_length=10)),
                ("special_accommodations", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("user", models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name="volunteer_profile", to=settings.AUTH_USER_MODEL)),
            ],
        ),
        migrations.CreateModel(
            name="VendorRegistration",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("cart_item_id", models.CharField(max_length=64)),
                ("status", models.CharField(choices=REVIEW_STATUS_CHOICES, default="pending", max_length=20)),
                ("notes", models.TextField(blank=True, default="")),
                ("reviewed_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("preferred_location", models.CharField(blank=True, default="", max_length=255)),
                ("event", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="+", to="events.event")),
                ("product", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="+", to="events.product")),
                ("reviewed_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("vendor_profile", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="registrations", to="registrations.vendorprofile")),
            ],
            options={
                "ordering": ["-created_at", "-id"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="VolunteerAssignment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("cart_item_id", models.CharField(max_length=64)),
                ("status", models.CharField(choices=REVIEW_STATUS_CHOICES, default="pending", max_length=20)),
                ("notes", models.TextField(blank=True, default="")),
                ("reviewed_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("availability", models.CharField(blank=True, default="", max_length=100)),
                ("event", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="+", to="events.event")),
                ("product", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="+", to="events.product")),
                ("reviewed_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("volunteer_profile", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="assignments", to="registrations.volunteerprofile")),
            ],
            options={
                "ordering": ["-created_at", "-id"],
                "abstract": False,
            },
        ),
        migrations.AddConstraint(
            model_name="vendorregistration",
            constraint=models.UniqueConstraint(fields=("user", "cart_item_id"), name="vendor_registration_cart_item_unique"),
        ),
        migrations.AddIndex(
            model_name="vendorregistration",
            index=models.Index(fields=["event", "status"], name="vendor_reg_event_status_idx"),
        ),
        migrations.AddConstraint(
            model_name="volunteerassignment",
            constraint=models.UniqueConstraint(fields=("user", "cart_item_id"), name="volunteer_assignment_cart_item_unique"),
        ),
        migrations.AddIndex(
            model_name="volunteerassignment",
            index=models.Index(fields=["event", "status"], name="volunteer_asg_event_status_idx"),
        ),
    ]
