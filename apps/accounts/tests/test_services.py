import pytest
from apps.accounts.models import User
from apps.accounts.services import (
    InactiveAccountError,
    InvalidCredentialsError,
    InvalidTokenError,
    sign_in,
    sign_out,
)

PASSWORD = 'TestPass123!'


@pytest.mark.django_db
class TestStaffManager:

    def test_email_is_normalized(self):
        user = User.objects.create_user(email='Baker@Example.COM', password=PASSWORD)

        assert user.email == 'baker@example.com'
        assert user.is_staff is False
        assert str(user) == 'baker'

    def test_email_required(self):
        with pytest.raises(ValueError):
            User.objects.create_user(email='', password=PASSWORD)

    def test_owner(self):
        owner = User.objects.create_superuser(email='owner@example.com', password=PASSWORD)

        assert owner.is_manager is True
        assert owner.is_superuser is True

    def test_owner_must_be_manager(self):
        with pytest.raises(ValueError):
            User.objects.create_superuser(email='owner@example.com', password=PASSWORD, is_staff=False)


@pytest.mark.django_db
class TestSignIn:

    def test_sign_in(self, counter_staff):
        session = sign_in(email='  counter@example.com ', password=PASSWORD)

        assert session['user'] == counter_staff
        assert session['tokens']['access']
        counter_staff.refresh_from_db()
        assert counter_staff.last_login is not None

    def test_wrong_password(self, counter_staff):
        with pytest.raises(InvalidCredentialsError):
            sign_in(email=counter_staff.email, password='wrong')

    def test_deactivated(self, former_staff):
        with pytest.raises(InactiveAccountError):
            sign_in(email=former_staff.email, password=PASSWORD)

        former_staff.refresh_from_db()
        assert former_staff.last_login is None

    def test_sign_out_rejects_bad_token(self, counter_staff):
        with pytest.raises(InvalidTokenError):
            sign_out(user=counter_staff, refresh_token='garbage')

    def test_sign_out_without_token(self, counter_staff):
        sign_out(user=counter_staff)
