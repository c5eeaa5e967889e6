from __future__ import annotations

from typing import Optional

CLIENT_TYPE_IOS = "ios"
CLIENT_TYPE_ANDROID_NG = "android-ng"

SMS_IOS_VERIFICATION_TEXT = "Your verification code: {code}\n\nOr tap: sgnl://verify/{code}"
# Trailing token is the app hash the Android SMS Retriever API matches on
SMS_ANDROID_NG_VERIFICATION_TEXT = "<#> Your verification code: {code}\n\ndoDiFGKPO1r"
SMS_VERIFICATION_TEXT = "Your verification code: {code}"


def verification_text(client_type: Optional[str], code: str) -> str:
    if client_type == CLIENT_TYPE_IOS:
        return SMS_IOS_VERIFICATION_TEXT.format(code=code)
    if client_type == CLIENT_TYPE_ANDROID_NG:
        return SMS_ANDROID_NG_VERIFICATION_TEXT.format(code=code)
    return SMS_VERIFICATION_TEXT.format(code=code)
