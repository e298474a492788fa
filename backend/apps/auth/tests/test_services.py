import unittest

from apps.auth.services import RegistrationService, SessionService


class FakeUser:
    def __init__(self, **attrs):
        self.role = "user"
        self.__dict__.update(attrs)


class FakeUserRepository:
    def __init__(self):
        self.usernames = set()
        self.emails = set()
        self.created = []

    def username_exists(self, username: str) -> bool:
        return username in self.usernames

    def email_exists(self, email: str) -> bool:
        return email in self.emails

    def create_user(self, **data):
        payload = dict(data)
        payload.setdefault("id", len(self.created) + 1)
        user = FakeUser(**payload)
        self.created.append(payload)
        self.usernames.add(user.username)
        self.emails.add(user.email)
        return user


class RegistrationServiceTests(unittest.TestCase):
    def setUp(self):
        self.repo = FakeUserRepository()
        self.service = RegistrationService(users=self.repo)

    def test_register_hashes_password_and_normalizes_email(self):
        result = self.service.register(
            {
                "username": " alice ",
                "email": "Alice@Example.com",
                "password": "Secret123!",
                "name": "Alice Example",
                "phone": "",
            }
        )
        self.assertEqual(result["username"], "alice")
        self.assertEqual(result["email"], "alice@example.com")
        self.assertEqual(result["role"], "user")
        stored = self.repo.created[0]
        self.assertNotEqual(stored["password"], "Secret123!")
        self.assertIsNone(stored["phone"])

    def test_register_duplicate_username(self):
        self.repo.usernames.add("dup")
        result = self.service.register(
            {"username": "dup", "email": "dup@example.com", "password": "Secret123!"}
        )
        self.assertEqual(result[0], "VALIDATION_ERROR")
        self.assertEqual(self.repo.created, [])

    def test_register_duplicate_email(self):
        self.repo.emails.add("dup@example.com")
        result = self.service.register(
            {"username": "fresh", "email": "DUP@example.com", "password": "Secret123!"}
        )
        self.assertEqual(result[1], "Email is already registered")

    def test_is_username_available_checks_repository(self):
        self.repo.usernames.add("taken")
        self.assertFalse(self.service.is_username_available(" taken "))
        self.assertTrue(self.service.is_username_available("free"))


class SessionServiceTests(unittest.TestCase):
    def test_logout_without_token_is_rejected(self):
        error = SessionService().logout(None, actor_id=3)
        self.assertEqual(error[0], "VALIDATION_ERROR")
        self.assertEqual(error[2], {"refresh": None})
