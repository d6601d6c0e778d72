"""Tests for accounts and session resolution."""

import re

import pytest

from growthpath.core.accounts import (
    AccountError,
    AuthenticationError,
    generate_student_number,
    resolve_session,
    sign_in,
    sign_up,
)


class TestSignUp:
    """Tests for sign_up."""

    def test_student_gets_student_row(self, backend):
        """Student sign-up creates a user row and an active student row."""
        user = sign_up("ana@example.com", "secret1", "Ana Lopez", "student")

        assert user.role == "student"
        assert backend.rows("users")[0]["email"] == "ana@example.com"
        students = backend.rows("students")
        assert len(students) == 1
        assert students[0]["user_id"] == user.id
        assert students[0]["status"] == "active"
        assert students[0]["overall_progress"] == 0
        assert re.fullmatch(r"STU\d{6}", students[0]["student_number"])

    def test_instructor_has_no_student_row(self, backend):
        """Instructor sign-up creates only the user row."""
        sign_up("tom@example.com", "secret1", "Tom", "instructor")
        assert backend.rows("students") == []

    @pytest.mark.parametrize(
        "email,password,name,role,message",
        [
            ("ana@example.com", "secret1", "Ana", "admin", "Role must be one of"),
            ("not-an-email", "secret1", "Ana", "student", "Invalid email"),
            ("ana@example.com", "12345", "Ana", "student", "at least 6"),
            ("ana@example.com", "secret1", "  ", "student", "Full name is required"),
        ],
    )
    def test_invalid_input(self, backend, email, password, name, role, message):
        """Invalid input is rejected before calling the backend."""
        with pytest.raises(AccountError, match=message):
            sign_up(email, password, name, role)
        assert backend.rows("users") == []

    def test_duplicate_email(self, backend):
        """Backend refusal becomes AccountError."""
        sign_up("ana@example.com", "secret1", "Ana", "student")
        with pytest.raises(AccountError, match="Failed to create account"):
            sign_up("ana@example.com", "secret1", "Ana", "student")


class TestSignIn:
    """Tests for sign_in and resolve_session."""

    def test_sign_in_and_resolve(self, backend):
        """A signed-in token resolves back to the same user."""
        user = sign_up("ana@example.com", "secret1", "Ana Lopez", "student")

        session = sign_in("ana@example.com", "secret1")
        assert session.user.id == user.id
        assert session.is_student
        assert not session.is_instructor

        resolved = resolve_session(session.access_token)
        assert resolved.user.id == user.id
        assert resolved.role == "student"

    def test_wrong_password(self, backend):
        """Bad credentials raise AuthenticationError."""
        sign_up("ana@example.com", "secret1", "Ana", "student")
        with pytest.raises(AuthenticationError, match="Invalid email or password"):
            sign_in("ana@example.com", "wrong-password")

    def test_unknown_token(self, backend):
        """Unknown tokens are rejected."""
        with pytest.raises(AuthenticationError, match="Invalid or expired token"):
            resolve_session("bogus")

    def test_empty_token(self, backend):
        """Empty token is rejected without a backend call."""
        with pytest.raises(AuthenticationError, match="Not authenticated"):
            resolve_session("")

    def test_token_without_profile(self, backend):
        """A valid token whose user has no profile row is rejected."""
        token = backend.auth.issue_token("ghost")
        with pytest.raises(AuthenticationError, match="profile not found"):
            resolve_session(token)


class TestStudentNumber:
    """Tests for generate_student_number."""

    def test_format(self):
        """Numbers are STU plus six digits."""
        for _ in range(20):
            assert re.fullmatch(r"STU\d{6}", generate_student_number())
