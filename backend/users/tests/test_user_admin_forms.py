"""
Staff Account Admin Form Tests

Staff accounts are created from the Django admin; passwords must be stored
hashed and confirmed on entry.
"""
import pytest

from users.forms import UserAdminChangeForm, UserAdminCreationForm
from users.models import User


@pytest.mark.django_db
class TestUserAdminForms:

    def test_creation_form_hashes_password(self):
        """
        CRITICAL: New staff passwords are never stored in plain text

        Business Impact: Leaked database rows must not expose till logins
        """
        form = UserAdminCreationForm(data={
            "email": "new.cashier@robusters.in",
            "username": "newcashier",
            "role": User.Role.CASHIER,
            "password1": "Till-Pass-2026",
            "password2": "Till-Pass-2026",
        })

        assert form.is_valid(), form.errors
        user = form.save()

        assert user.role == User.Role.CASHIER
        assert user.password != "Till-Pass-2026"
        assert user.check_password("Till-Pass-2026")

    def test_creation_form_rejects_mismatched_passwords(self):
        form = UserAdminCreationForm(data={
            "email": "new.cashier@robusters.in",
            "username": "newcashier",
            "role": User.Role.CASHIER,
            "password1": "Till-Pass-2026",
            "password2": "Till-Pass-2027",
        })

        assert not form.is_valid()
        assert "password2" in form.errors
        assert not User.objects.filter(email="new.cashier@robusters.in").exists()

    def test_change_form_keeps_password_hash(self, cashier_user):
        form = UserAdminChangeForm(instance=cashier_user)

        assert form.initial["password"] == cashier_user.password
        assert form.fields["password"].disabled
