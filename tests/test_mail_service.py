"""
Tests para contact_mailer/app/services/mail.py
Servicio de envío del aviso de contacto.
"""
from unittest.mock import Mock, patch

import pytest
from flask_mail import Message

from contact_mailer.app.services.mail import (
    DispatchResult,
    NotSentReason,
    RecipientInfo,
    compose_contact_body,
    dispatch_contact_email,
    header_display_name,
    resolve_recipient,
    resolve_site_name,
)
from contact_mailer.app.extensions import mail
from contact_mailer.app.services.messages import SEND_FAILED_MESSAGE


def _config(**options):
    return lambda key: options.get(key)


DATA = {
    "name": "John Doe",
    "email": "john@example.com",
    "company": "ACME",
    "message": "I need help with my account",
}


class TestResolveRecipient:
    """Tests para resolve_recipient."""

    def test_uses_contact_address_option(self):
        get_config = _config(contact_address={"address": "owner@example.com", "name": "Owner"})
        assert resolve_recipient(get_config) == RecipientInfo("owner@example.com", "Owner")

    def test_default_name_is_admin(self):
        get_config = _config(contact_address={"address": "owner@example.com"})
        assert resolve_recipient(get_config).name == "Admin"

    def test_invalid_address_falls_back_to_admin_email(self):
        get_config = _config(
            contact_address={"address": "not an address", "name": "Owner"},
            admin_email="admin@example.org",
        )
        assert resolve_recipient(get_config) == RecipientInfo("admin@example.org", "Owner")

    def test_missing_option_falls_back_to_admin_email(self):
        get_config = _config(admin_email="admin@example.org")
        assert resolve_recipient(get_config) == RecipientInfo("admin@example.org", "Admin")

    def test_nothing_configured_gives_empty_address(self):
        assert resolve_recipient(_config()) == RecipientInfo("", "Admin")

    def test_non_string_admin_email_gives_empty_address(self):
        assert resolve_recipient(_config(admin_email=["a@example.org"])).address == ""

    def test_reads_app_config_by_default(self, app):
        with app.app_context():
            assert resolve_recipient() == RecipientInfo("owner@example.com", "Site Owner")


class TestResolveSiteName:
    """Tests para resolve_site_name."""

    def test_uses_url_host(self):
        assert resolve_site_name(_config(site_url="https://www.example.com/path?x=1")) == "www.example.com"

    def test_url_without_host_is_generic(self):
        assert resolve_site_name(_config(site_url="example.com")) == "Contact Form"

    @pytest.mark.parametrize("value", [None, "", "   ", 123])
    def test_missing_url_is_generic(self, value):
        assert resolve_site_name(_config(site_url=value)) == "Contact Form"


def test_compose_body_has_labeled_lines_and_message_last():
    body = compose_contact_body(DATA)
    lines = body.splitlines()
    assert lines[0] == "Name: John Doe"
    assert lines[1] == "Email: john@example.com"
    assert lines[2] == "Company: ACME"
    assert "Message:" in lines
    assert body.endswith("I need help with my account")


class TestDispatchContactEmail:
    """Tests para dispatch_contact_email."""

    def test_errors_short_circuit_without_sending(self, app):
        with app.app_context():
            mock_mail = Mock()
            messages = {"name": "Name cannot be blank"}
            result = dispatch_contact_email(DATA, messages, mock_mail)

            assert result == DispatchResult(sent=False, reason=NotSentReason.VALIDATION)
            mock_mail.send.assert_not_called()
            assert messages == {"name": "Name cannot be blank"}

    def test_sends_email_once(self, app):
        with app.app_context():
            mock_mail = Mock()
            messages = {}
            result = dispatch_contact_email(DATA, messages, mock_mail)

            assert result == DispatchResult(sent=True)
            assert "generic" not in messages
            mock_mail.send.assert_called_once()

            sent_message = mock_mail.send.call_args[0][0]
            assert isinstance(sent_message, Message)
            assert sent_message.subject == "Contact From www.example.com"
            assert sent_message.recipients == [("Site Owner", "owner@example.com")]
            assert "john@example.com" in sent_message.sender
            assert "John Doe" in sent_message.sender
            assert sent_message.reply_to == "john@example.com"
            assert sent_message.body == compose_contact_body(DATA)

    def test_uses_injected_config(self, app):
        with app.app_context():
            mock_mail = Mock()
            get_config = _config(admin_email="admin@example.org")
            dispatch_contact_email(DATA, {}, mock_mail, get_config=get_config)

            sent_message = mock_mail.send.call_args[0][0]
            assert sent_message.subject == "Contact From Contact Form"
            assert sent_message.recipients == [("Admin", "admin@example.org")]

    def test_transport_failure_sets_generic_message(self, app):
        with app.app_context():
            mock_mail = Mock()
            mock_mail.send.side_effect = Exception("SMTP connection failed")
            messages = {}

            result = dispatch_contact_email(DATA, messages, mock_mail)

            assert result == DispatchResult(sent=False, reason=NotSentReason.TRANSPORT_ERROR)
            assert messages == {"generic": SEND_FAILED_MESSAGE}
            assert mock_mail.send.call_count == 1

    def test_transport_failure_is_logged_but_not_exposed(self, app):
        with app.app_context():
            mock_mail = Mock()
            mock_mail.send.side_effect = Exception("SMTP error 554")
            messages = {}

            with patch.object(app.logger, "error") as mock_log:
                dispatch_contact_email(DATA, messages, mock_mail)

            mock_log.assert_called_once()
            assert "SMTP error 554" in str(mock_log.call_args)
            assert mock_log.call_args.kwargs["extra"]["event"] == "contact.send_failed"
            assert "SMTP" not in messages["generic"]

    def test_transport_error_without_text_logs_its_type(self, app):
        with app.app_context():
            mock_mail = Mock()
            mock_mail.send.side_effect = ConnectionResetError()

            with patch.object(app.logger, "error") as mock_log:
                dispatch_contact_email(DATA, {}, mock_mail)

            assert mock_log.call_args.kwargs["extra"]["error"] == "ConnectionResetError"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Juan\nPerez", "Juan Perez"),
        ("Juan\r\n  Perez ", "Juan Perez"),
        ("Juan Perez", "Juan Perez"),
        (None, ""),
    ],
)
def test_header_display_name(raw, expected):
    assert header_display_name(raw) == expected


class TestRealMailTransport:
    """Envío con flask_mail.Mail real (MAIL_SUPPRESS_SEND): se aplican sus controles de cabeceras."""

    def test_multiline_name_is_sent(self, app):
        data = dict(DATA, name="Juan\nPerez")
        with app.app_context(), mail.record_messages() as outbox:
            messages = {}
            result = dispatch_contact_email(data, messages, mail)

        assert result == DispatchResult(sent=True)
        assert messages == {}
        assert len(outbox) == 1
        assert "Juan Perez" in str(outbox[0].sender)
        assert "\n" not in str(outbox[0].sender)
        assert "Name: Juan\nPerez" in outbox[0].body

    def test_multiline_recipient_name_is_sent(self, app):
        get_config = _config(contact_address={"address": "owner@example.com", "name": "Site\nOwner"})
        with app.app_context(), mail.record_messages() as outbox:
            result = dispatch_contact_email(DATA, {}, mail, get_config=get_config)

        assert result == DispatchResult(sent=True)
        assert len(outbox) == 1
