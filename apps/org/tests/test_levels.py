from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse

from apps.org.models import Level, LevelMembership


class LevelModelTest(TestCase):

    def test_slug_is_unique(self):
        a = Level.objects.create(name="North Campus")
        b = Level(name="North  Campus")
        b.save()
        self.assertEqual(a.slug, "north-campus")
        self.assertEqual(b.slug, "north-campus-2")


class LevelSelectionTest(TestCase):

    @classmethod
    def setUpTestData(cls):
        User = get_user_model()
        cls.user = User.objects.create_user(username="dana", password="pw")
        cls.other = User.objects.create_user(username="eli", password="pw")
        cls.first = Level.objects.create(name="Admin Block")
        cls.second = Level.objects.create(name="Workshop")
        cls.foreign = Level.objects.create(name="Hospital")
        LevelMembership.objects.create(level=cls.first, user=cls.user, role=LevelMembership.ROLE_DRIVER)
        LevelMembership.objects.create(level=cls.second, user=cls.user, role=LevelMembership.ROLE_FUEL_MANAGER)
        LevelMembership.objects.create(level=cls.foreign, user=cls.other)

    def test_first_membership_is_default(self):
        self.client.force_login(self.user)
        body = self.client.get(reverse("org:level_list")).json()

        self.assertEqual([lv["name"] for lv in body["levels"]], ["Admin Block", "Workshop"])
        current = [lv["name"] for lv in body["levels"] if lv["current"]]
        self.assertEqual(current, ["Admin Block"])
        self.assertEqual(self.client.session["level_id"], self.first.pk)

    def test_select_level(self):
        self.client.force_login(self.user)
        resp = self.client.post(reverse("org:level_set", args=[self.second.pk]))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["role"], LevelMembership.ROLE_FUEL_MANAGER)

        body = self.client.get(reverse("core:dashboard")).json()
        self.assertEqual(body["level"], "Workshop")

    def test_cannot_select_foreign_level(self):
        self.client.force_login(self.user)
        resp = self.client.post(reverse("org:level_set", args=[self.foreign.pk]))
        self.assertEqual(resp.status_code, 404)

    def test_stale_session_level_falls_back(self):
        self.client.force_login(self.user)
        session = self.client.session
        session["level_id"] = self.foreign.pk
        session.save()

        body = self.client.get(reverse("core:dashboard")).json()
        self.assertEqual(body["level"], "Admin Block")

    def test_user_without_membership(self):
        loner = get_user_model().objects.create_user(username="loner", password="pw")
        self.client.force_login(loner)
        self.assertIsNone(self.client.get(reverse("core:dashboard")).json()["level"])
        self.assertEqual(self.client.get(reverse("org:level_list")).json(), {"levels": []})
