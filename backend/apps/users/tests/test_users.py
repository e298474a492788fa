from rest_framework import status
from rest_framework.test import APITestCase
from rest_framework_simplejwt.tokens import RefreshToken

from apps.users.models import User


class TestUsersAdminApi(APITestCase):
    def setUp(self):
        self.admin = User.objects.create_user(
            username="admin",
            password="AdminPass123!",
            email="admin@example.com",
            role=User.Role.ADMIN,
        )
        self.member = User.objects.create_user(
            username="member",
            password="MemberPass123!",
            email="member@example.com",
            name="Mia Member",
        )
        self.list_url = "/api/users/"
        self.role_url = lambda uid: f"/api/users/{uid}/role/"

    def _auth(self, user):
        token = RefreshToken.for_user(user).access_token
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")

    def test_list_requires_authentication(self):
        response = self.client.get(self.list_url)
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data["error"]["code"], "UNAUTHORIZED")

    def test_list_forbidden_for_regular_user(self):
        self._auth(self.member)
        response = self.client.get(self.list_url)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_lists_and_searches_users(self):
        self._auth(self.admin)
        response = self.client.get(self.list_url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual({u["username"] for u in response.data}, {"admin", "member"})

        filtered = self.client.get(self.list_url, {"search": "mia"})
        self.assertEqual([u["username"] for u in filtered.data], ["member"])

    def test_admin_promotes_user_to_event_owner(self):
        self._auth(self.admin)
        response = self.client.put(
            self.role_url(self.member.id), {"role": "event_owner"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["role"], "event_owner")
        self.member.refresh_from_db()
        self.assertEqual(self.member.role, User.Role.EVENT_OWNER)

    def test_invalid_role_rejected(self):
        self._auth(self.admin)
        response = self.client.put(
            self.role_url(self.member.id), {"role": "superhero"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_role_update_unknown_user(self):
        self._auth(self.admin)
        response = self.client.put(self.role_url(9999), {"role": "user"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
