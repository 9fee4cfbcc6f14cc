"""Fixed user-facing strings for the two supported locales."""

from exam_pilot.models.profile import Language

MESSAGES: dict[Language, dict[str, str]] = {
    Language.EN: {
        "image_question": "Question from image",
        "empty_question": "Please enter a question",
        "upgrade_prompt": (
            "You've reached your daily limit. "
            "Upgrade to Premium for unlimited questions."
        ),
        "explanation_ready": "Explanation ready!",
        "new_badge": "New badge: {name}!",
        "welcome": "Welcome Back!",
        "account_created": "Account created! Welcome to ExamPilot!",
        "logged_out": "Logged out",
    },
    Language.AR: {
        "image_question": "سؤال من صورة",
        "empty_question": "الرجاء إدخال سؤال",
        "upgrade_prompt": "لقد وصلت للحد اليومي. رقي للبريميوم لأسئلة غير محدودة.",
        "explanation_ready": "الشرح جاهز!",
        "new_badge": "شارة جديدة: {name}!",
        "welcome": "أهلاً بعودتك!",
        "account_created": "تم إنشاء الحساب! مرحباً بك في ExamPilot!",
        "logged_out": "تم تسجيل الخروج",
    },
}


def message(key: str, language: Language = Language.EN, **kwargs: str) -> str:
    text = MESSAGES[Language(language)][key]
    return text.format(**kwargs) if kwargs else text
