from datetime import timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from apps.events.models import Event, Product
from apps.users.models import User

USERS = [
    {
        "username": "admin",
        "email": "admin@example.com",
        "name": "Site Admin",
        "password": "AdminPass123!",
        "role": User.Role.ADMIN,
    },
    {
        "username": "organizer",
        "email": "organizer@example.com",
        "name": "Riverside Events",
        "password": "OrganizerPass123!",
        "role": User.Role.EVENT_OWNER,
    },
    {
        "username": "attendee",
        "email": "attendee@example.com",
        "name": "Avery Attendee",
        "password": "AttendeePass123!",
        "role": User.Role.USER,
    },
]

# (title, event_type, location, days from now, duration in hours, products)
# products: (type, name, price, quantity or None)
EVENTS = [
    (
        "Riverside Summer Market",
        "market",
        "Riverside Park",
        21,
        8,
        [
            (Product.Type.TICKET, "Day pass", "10.00", 500),
            (Product.Type.VENDOR_SPOT, "10x10 vendor booth", "75.00", 40),
            (Product.Type.VOLUNTEER_SHIFT, "Morning setup crew", "0.00", 15),
            (Product.Type.MERCHANDISE, "Market tote bag", "18.00", None),
        ],
    ),
    (
        "Harbor Jazz Night",
        "concert",
        "Pier 9 Pavilion",
        35,
        4,
        [
            (Product.Type.TICKET, "General admission", "30.00", 300),
            (Product.Type.TICKET, "VIP table seat", "85.00", 24),
            (Product.Type.ADDON, "Parking pass", "12.00", 100),
            (Product.Type.VOLUNTEER_SHIFT, "Usher shift", "0.00", 10),
        ],
    ),
    (
        "Autumn Food Truck Rally",
        "festival",
        "Old Mill Square",
        60,
        6,
        [
            (Product.Type.TICKET, "Entry wristband", "5.00", None),
            (Product.Type.VENDOR_SPOT, "Food truck slot", "150.00", 20),
        ],
    ),
]


class Command(BaseCommand):
    help = "Seed demo users, events and products for local development."

    def add_arguments(self, parser):
        parser.add_argument(
            "--flush", action="store_true", help="Delete seeded events before seeding"
        )

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write("Seeding users...")
        users = {}
        for payload in USERS:
            attrs = dict(payload)
            raw_password = attrs.pop("password")
            username = attrs.pop("username")
            is_admin = attrs["role"] == User.Role.ADMIN
            defaults = dict(attrs, is_staff=is_admin, is_superuser=is_admin)
            user, created = User.objects.get_or_create(username=username, defaults=defaults)
            if not created:
                for field, value in defaults.items():
                    setattr(user, field, value)
            user.set_password(raw_password)
            user.save()
            users[username] = user

        owner = users["organizer"]
        if options["flush"]:
            self.stdout.write("Flushing seeded events...")
            Event.objects.filter(owner=owner, title__in=[e[0] for e in EVENTS]).delete()

        self.stdout.write("Seeding events...")
        now = timezone.now().replace(minute=0, second=0, microsecond=0)
        for title, event_type, location, days, hours, products in EVENTS:
            start = now + timedelta(days=days)
            event, created = Event.objects.get_or_create(
                title=title,
                owner=owner,
                defaults=dict(
                    description=f"{title} at {location}.",
                    location=location,
                    start_date=start,
                    end_date=start + timedelta(hours=hours),
                    event_type=event_type,
                    price=min(Decimal(p[2]) for p in products if p[0] == Product.Type.TICKET),
                ),
            )
            if not created:
                continue
            Product.objects.bulk_create(
                [
                    Product(
                        event=event,
                        type=product_type,
                        name=name,
                        price=Decimal(price),
                        quantity=quantity,
                    )
                    for product_type, name, price, quantity in products
                ]
            )

        self.stdout.write(self.style.SUCCESS("Event seed completed."))
