from messaging.templates import (
    SMS_ANDROID_NG_VERIFICATION_TEXT,
    SMS_IOS_VERIFICATION_TEXT,
    SMS_VERIFICATION_TEXT,
    verification_text,
)

def test_ios_text_has_code_twice():
    text = verification_text("ios", "123456")
    assert text == SMS_IOS_VERIFICATION_TEXT.format(code="123456")
    assert text.count("123456") == 2

def test_android_ng_text_has_code_once():
    text = verification_text("android-ng", "123456")
    assert text == SMS_ANDROID_NG_VERIFICATION_TEXT.format(code="123456")
    assert text.count("123456") == 1
    assert text.startswith("<#> ")

def test_default_text_for_other_client_types():
    for client_type in (None, "", "android", "IOS", "web"):
        text = verification_text(client_type, "987-654")
        assert text == SMS_VERIFICATION_TEXT.format(code="987-654")
        assert text.count("987-654") == 1
