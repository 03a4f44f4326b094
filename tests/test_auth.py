import pytest

from html_to_pdf.auth import SharedSecretAuthorizer


def test_accepts_only_the_shared_secret():
    authorizer = SharedSecretAuthorizer("102005")
    assert authorizer.authorize("102005")
    assert not authorizer.authorize("102006")
    assert not authorizer.authorize("")
    assert not authorizer.authorize(None)


def test_empty_secret_rejected():
    with pytest.raises(ValueError):
        SharedSecretAuthorizer("")
