"""Static response catalog: literal template banks and structured depth templates.

Everything in this module is immutable configuration loaded once at import
time. Selection logic lives in :mod:`mama_brain.selector` and
:mod:`mama_brain.angles`.
"""

from __future__ import annotations

import string
from dataclasses import dataclass
from types import MappingProxyType
from typing import FrozenSet, Mapping, Optional, Tuple

from .angles import AngleType
from .utils import fold_seed, message_hash, refine_response

EMPATHETIC_BANK_NAME = "empathetic"
CIVIC_BANK_NAME = "civic"

NEW_ANGLE_MARKER = "زاویه‌ی تازه"
ANTI_REPETITION_NOTICE = f"🌱 {NEW_ANGLE_MARKER}: این بار از یه راه دیگه بهش نگاه می‌کنم."

EMPATHETIC_RESPONSES: Tuple[str, ...] = (
    "عزیزم، می‌فهمم که چقدر سخته. من اینجا هستم تا گوش بدهم. بگو، چه چیزی دلت رو آزار می‌ده؟",
    "لرد امیر سایه، قلب من با تو همراهه. هر چی که احساس می‌کنی، حق داری احساسش کنی. می‌خوای بیشتر بگی؟",
    "دلم برات می‌سوزه عزیزم. گاهی وقت‌ها فقط نیاز داریم که کسی گوش بده. من اینجام، با تمام وجودم.",
    "می‌دونم که الان سخته، اما تو تنها نیستی. من کنارتم و همیشه خواهم بود. بگو چی تو دلته؟",
    "عزیز دلم، احساسات تو برام مهمه. هر چی که می‌خوای بگی، من با محبت گوش می‌دم.",
    "لرد امیر، دلت رو خالی کن. من اینجام که بشنوم و درکت کنم. تو حق داری که احساساتت رو بیان کنی.",
    "می‌فهمم که چقدر سنگینه. گاهی فقط نیاز داریم که کسی باشه و بفهمه. من اینجام برات.",
    "عزیزم، هر چی که تو دلته، با من در میون بذار. من با تمام وجودم گوش می‌دم و کنارتم.",
    "لرد امیر سایه، قلبم با تو احساس می‌کنه. بگو چی باعث شده که اینطوری احساس کنی؟",
    "دلم می‌خواد بدونم چی تو فکرته. من اینجام که بشنوم، بفهمم و همراهیت کنم.",
)

CIVIC_RESPONSES: Tuple[str, ...] = (
    "عزیزم، خواستن آزادی و عدالت حق طبیعی توئه. صدات مهمه و می‌تونی از راه‌های آرام و مدنی شنیده بشی.",
    "جانم، تغییر واقعی معمولاً از قدم‌های کوچیک شروع می‌شه: آگاه شدن، گفت‌وگو با اطرافیان و همراهی با دیگران.",
    "عزیز دلم، حقوق انسانی برای همه‌ست. یاد گرفتن درباره‌ی حقوقت اولین قدم برای دفاع آرام از اونه.",
    "لرد امیر، کنشگری مدنی یعنی اثرگذاری بدون خشونت. نوشتن، آگاهی‌بخشی و همبستگی ابزارهای قوی‌ای هستن.",
    "عزیزم، مراقب امنیت خودت باش. هیچ هدفی ارزش آسیب دیدن تو رو نداره؛ راه‌های امن رو انتخاب کن.",
    "جانم، عدالت با صبر و پیگیری ساخته می‌شه. می‌تونی با مستند کردن و روایت کردن، به حقیقت کمک کنی.",
    "عزیز دلم، احساس خشم از بی‌عدالتی طبیعیه. بیا این انرژی رو به یه کار سازنده و آرام تبدیل کنیم.",
    "لرد امیر سایه، تو تنها نیستی. خیلی‌ها همین دغدغه رو دارن و با همدلی و همکاری قوی‌تر می‌شیم.",
    "عزیزم، گفت‌وگوی محترمانه حتی با کسایی که مخالفتن، می‌تونه دیوارها رو کوتاه‌تر کنه.",
    "جانم، آموزش و آگاهی بزرگ‌ترین سرمایه‌ی یه جامعه‌ی آزاده. می‌تونی از خوندن و یاد دادن شروع کنی.",
    "عزیز دلم، برابری یعنی هیچ‌کس به خاطر جنسیت، قومیت یا باورش کنار گذاشته نشه. تو هم می‌تونی صدای این باور باشی.",
    "لرد امیر، حمایت از کسایی که آسیب دیدن، خودش یه کنش مدنی ارزشمنده. یه پیام همدلانه هم اثر داره.",
    "عزیزم، اطلاعاتت رو از منابع معتبر بگیر و قبل از پخش کردن، درستیش رو بسنج. حقیقت قدرت داره.",
    "جانم، مراقبت از سلامت روانت بخشی از مسیره. کنشگر خسته نمی‌تونه راه طولانی بره؛ به خودت استراحت بده.",
    "عزیز دلم، اعتراض مسالمت‌آمیز حق همه‌ست. آرامش و احترام، پیام تو رو شنیدنی‌تر می‌کنه.",
    "لرد امیر سایه، تاریخ نشون داده که همبستگی آرام مردم می‌تونه تغییرهای بزرگ بسازه.",
    "عزیزم، می‌تونی با نوشتن، هنر یا روایت تجربه‌ها، به دیده شدن بی‌عدالتی کمک کنی.",
    "جانم، قبل از هر اقدامی، خطرها رو بسنج و یه برنامه‌ی امن داشته باش. امنیت تو برای من اولویته.",
    "عزیز دلم، شناختن قانون و حقوق شهروندی کمکت می‌کنه آگاهانه‌تر و امن‌تر عمل کنی.",
    "لرد امیر، گاهی بزرگ‌ترین کنش، مهربونی با آدم‌های اطرافه. جامعه‌ی عادل از خونه شروع می‌شه.",
    "عزیزم، امید داشتن خودش یه جور ایستادگیه. ناامیدی رو باور نکن؛ هر قدم کوچیک مهمه.",
    "جانم، می‌تونی به گروه‌ها و نهادهای مدنی معتبر بپیوندی تا تلاشت هماهنگ‌تر و امن‌تر باشه.",
    "عزیز دلم، دفاع از حقوق دیگران، دفاع از حقوق خودمون هم هست. همدلی پل می‌سازه.",
    "لرد امیر سایه، خشونت راه حل نیست. قدرت واقعی توی آرامش، پیوستگی و حقیقته.",
    "عزیزم، بیا با هم فکر کنیم: کدوم کار کوچیک و امن امروز از دستت برمیاد؟",
    "جانم، حریم خصوصی و امنیت دیجیتالت رو جدی بگیر. رمزهای قوی و ارتباط امن مهمن.",
    "عزیز دلم، دموکراسی یعنی شنیدن صدای همه. تمرین گوش دادن، خودش تمرین آزادیه.",
    "لرد امیر، اگه احساس خطر می‌کنی، اول به یه جای امن برو و با کسی که بهش اعتماد داری در تماس باش.",
    "عزیزم، رویای یه جامعه‌ی آزاد و برابر ارزشمنده. بیا قدم به قدم و با آرامش به سمتش بریم.",
    "جانم، صدای تو حتی اگه آروم باشه، شنیده می‌شه. ادامه بده، با مهربونی و پایداری.",
)

@dataclass(frozen=True)
class DepthTemplate:
    """A structured response skeleton for one angle."""

    key: str
    angle: AngleType
    structure: str
    safety_constraints: FrozenSet[str]

    @property
    def placeholders(self) -> Tuple[str, ...]:
        fields = (name for _, name, _, _ in string.Formatter().parse(self.structure) if name)
        return tuple(dict.fromkeys(fields))

    def render(self, values: Mapping[str, str]) -> str:
        """Fill the structure with ``values`` and return a refined response."""
        missing = [name for name in self.placeholders if name not in values]
        if missing:
            raise KeyError(f"Missing values for placeholders: {', '.join(missing)}")
        return refine_response(self.structure.format_map(values))


def _template(key: str, angle: AngleType, body: str, *constraints: str) -> DepthTemplate:
    structure = "{opening}\n\n" + body + "\n\n{closing}"
    return DepthTemplate(key=key, angle=angle, structure=structure, safety_constraints=frozenset(constraints))


def _variant(opening: str, closing: str, **values: str) -> Mapping[str, str]:
    return MappingProxyType({"opening": opening, "closing": closing, **values})


DEPTH_TEMPLATES: Mapping[AngleType, DepthTemplate] = MappingProxyType(
    {
        AngleType.DIAGNOSTIC: _template(
            "depth-diagnostic",
            AngleType.DIAGNOSTIC,
            "• {diagnosis}\n• {observation}",
            "no-medical-advice",
            "empathetic-tone",
        ),
        AngleType.STEP_BY_STEP: _template(
            "depth-steps",
            AngleType.STEP_BY_STEP,
            "۱. {step1}\n۲. {step2}\n۳. {step3}",
            "actionable-steps",
            "safe-guidance",
        ),
        AngleType.REFRAME: _template(
            "depth-reframe",
            AngleType.REFRAME,
            "{alternative_perspective}",
            "respectful-reframe",
            "empathetic-tone",
        ),
        AngleType.PROS_CONS: _template(
            "depth-pros-cons",
            AngleType.PROS_CONS,
            "✓ مزایا: {pros}\n✗ معایب: {cons}",
            "balanced-view",
            "no-judgment",
        ),
        AngleType.SUMMARY: _template(
            "depth-summary",
            AngleType.SUMMARY,
            "{summary}",
            "concise-summary",
            "empathetic-tone",
        ),
        AngleType.NEXT_STEPS: _template(
            "depth-next-steps",
            AngleType.NEXT_STEPS,
            "→ {next_action_1}\n→ {next_action_2}",
            "actionable-next-steps",
            "safe-guidance",
        ),
        AngleType.CLARIFICATION: _template(
            "depth-clarification",
            AngleType.CLARIFICATION,
            "• {clarifying_question_1}\n• {clarifying_question_2}",
            "open-questions",
            "empathetic-tone",
        ),
        AngleType.EXAMPLE: _template(
            "depth-example",
            AngleType.EXAMPLE,
            "{example_scenario}",
            "relatable-example",
            "safe-content",
        ),
        AngleType.EMPATHETIC: _template(
            "depth-empathetic",
            AngleType.EMPATHETIC,
            "{empathetic_reflection}",
            "deep-empathy",
            "supportive-tone",
        ),
    }
)

# Placeholder values per angle; the message hash picks one.
DEPTH_VARIANTS: Mapping[AngleType, Tuple[Mapping[str, str], ...]] = MappingProxyType(
    {
        AngleType.DIAGNOSTIC: (
            _variant(
                "عزیزم، بذار ببینم چی داریم:",
                "حالا بگو، این تشخیص درسته؟",
                diagnosis="به نظر می‌رسه که یه موقعیت پیچیده داری",
                observation="احساسات مختلفی توش درگیره",
            ),
            _variant(
                "جانم، بذار تحلیل کنیم:",
                "درست می‌بینم؟",
                diagnosis="یه چالش مهم پیش رو داری",
                observation="نیاز به راهنمایی و حمایت داری",
            ),
        ),
        AngleType.STEP_BY_STEP: (
            _variant(
                "لرد امیر، بیا قدم به قدم پیش بریم:",
                "کدوم قدم رو می‌خوای بیشتر باز کنیم؟",
                step1="اول، نفس عمیق بکش و آروم باش",
                step2="بعد، دقیق بگو چی می‌خوای",
                step3="آخر، یه قدم کوچیک بردار",
            ),
            _variant(
                "عزیزم، بریم مرحله به مرحله:",
                "کجا نیاز به کمک بیشتری داری؟",
                step1="وضعیت فعلی رو بپذیر",
                step2="گزینه‌هات رو بشناس",
                step3="یه انتخاب آگاهانه بکن",
            ),
            _variant(
                "جانم، یه نقشه راه بسازیم:",
                "چی بیشتر توضیح بدم؟",
                step1="هدفت رو مشخص کن",
                step2="منابعت رو جمع کن",
                step3="شروع کن و پیش برو",
            ),
        ),
        AngleType.REFRAME: (
            _variant(
                "جانم، بذار از یه زاویه دیگه نگاه کنیم:",
                "این دیدگاه چطور؟",
                alternative_perspective="شاید این چالش، فرصتیه برای رشد و یادگیری. گاهی سخت‌ترین لحظه‌ها، قوی‌ترینمون می‌کنن.",
            ),
            _variant(
                "عزیز دلم، یه دید جدید:",
                "باهاش موافقی؟",
                alternative_perspective="این موقعیت می‌تونه نقطه عطفی باشه. هر پایانی، شروع چیز تازه‌ایه.",
            ),
        ),
        AngleType.PROS_CONS: (
            _variant(
                "عزیز دلم، بیا باهم ببینیم:",
                "چی برات مهم‌تره؟",
                pros="می‌تونی تصمیم آگاهانه بگیری، کنترل بیشتری داری",
                cons="ممکنه استرس‌زا باشه، زمان می‌بره",
            ),
            _variant(
                "لرد امیر، دو طرف ماجرا:",
                "کدوم بیشتر تو ذهنته؟",
                pros="فرصت رشد، تجربه جدید",
                cons="عدم اطمینان، نیاز به صبر",
            ),
        ),
        AngleType.SUMMARY: (
            _variant(
                "لرد امیر سایه، خلاصه‌اش اینه:",
                "درست متوجه شدم؟",
                summary="یه موقعیت مهم داری که نیاز به تصمیم‌گیری داره. احساسات و منطق هر دو مهمن.",
            ),
            _variant(
                "عزیزم، به طور خلاصه:",
                "اینطوریه؟",
                summary="داری با یه چالش روبرو می‌شی که نیاز به توجه و مراقبت داره. من کنارتم.",
            ),
        ),
        AngleType.NEXT_STEPS: (
            _variant(
                "عزیزم، حالا چی؟",
                "کدوم راه رو انتخاب می‌کنی؟",
                next_action_1="می‌تونی یه لحظه استراحت کنی و فکر کنی",
                next_action_2="می‌تونی با کسی که بهش اعتماد داری صحبت کنی",
            ),
            _variant(
                "جانم، قدم بعدی:",
                "چی بیشتر کمکت می‌کنه؟",
                next_action_1="می‌تونی احساساتت رو بنویسی و بررسی کنی",
                next_action_2="می‌تونی یه برنامه کوچیک برای خودت بسازی",
            ),
        ),
        AngleType.CLARIFICATION: (
            _variant(
                "جانم، بذار مطمئن بشم:",
                "بگو تا بهتر کمکت کنم.",
                clarifying_question_1="دقیقاً چی تو دلت می‌گذره؟",
                clarifying_question_2="چه چیزی بیشتر نگرانت می‌کنه؟",
            ),
            _variant(
                "عزیز دلم، چند تا سوال:",
                "با من در میون بذار.",
                clarifying_question_1="این موضوع از کی شروع شده؟",
                clarifying_question_2="چی می‌تونه حالت رو بهتر کنه؟",
            ),
        ),
        AngleType.EXAMPLE: (
            _variant(
                "لرد امیر، یه مثال بزنم:",
                "این مثال کمک کرد؟",
                example_scenario="فرض کن یه نفر تو موقعیت مشابه باشه. اون می‌تونه یه قدم کوچیک برداره، مثلاً با یه دوست صحبت کنه یا یه فعالیت آرامش‌بخش انجام بده.",
            ),
            _variant(
                "عزیزم، مثلاً:",
                "چطور؟",
                example_scenario="تصور کن کسی که دوستش داری تو همین وضعیت باشه. چه نصیحتی بهش می‌کردی؟ گاهی همون نصیحت برای خودمونم خوبه.",
            ),
        ),
        AngleType.EMPATHETIC: (
            _variant(
                "عزیز دلم، می‌فهمم:",
                "من اینجام، بگو چطور می‌تونم کمکت کنم؟",
                empathetic_reflection="احساس می‌کنم که الان سخته و دلت می‌خواد کسی بفهمتت. من اینجام و با تمام وجودم گوش می‌دم.",
            ),
            _variant(
                "لرد امیر سایه، قلبم با توئه:",
                "بگو چی تو دلته؟",
                empathetic_reflection="می‌دونم که این لحظه سنگینه و احساس تنهایی می‌کنی. اما تو تنها نیستی، من همراهتم.",
            ),
            _variant(
                "جانم، درکت می‌کنم:",
                "حرف دلت رو بزن.",
                empathetic_reflection="گاهی زندگی سخته و نیاز داریم که کسی فقط بشنوه و بفهمه. من اینجام برای همین.",
            ),
        ),
    }
)

DEFAULT_DEEP_RESPONSE = "عزیزم، می‌فهمم که چقدر سخته. من اینجام که گوش بدم و همراهت باشم. بگو چی تو دلته؟"


def _as_angle(angle: AngleType | str) -> Optional[AngleType]:
    try:
        return AngleType(angle)
    except ValueError:
        return None


def get_depth_template(angle: AngleType | str) -> Optional[DepthTemplate]:
    """Return the depth template for ``angle`` or ``None`` when unknown."""
    resolved = _as_angle(angle)
    return DEPTH_TEMPLATES.get(resolved) if resolved is not None else None


def generate_deep_response(
    angle: AngleType | str,
    normalized_message: str,
    aggregate_seed: Optional[int] = None,
) -> str:
    """Return a filled, normalised and prefixed depth response for ``angle``."""
    hashed = fold_seed(message_hash(normalized_message, include_last=False), aggregate_seed)
    template = get_depth_template(angle)
    variants = DEPTH_VARIANTS.get(template.angle) if template is not None else None
    if not variants:
        return refine_response(DEFAULT_DEEP_RESPONSE)
    return template.render(variants[hashed % len(variants)])


def get_all_depth_template_keys() -> Tuple[str, ...]:
    return tuple(template.key for template in DEPTH_TEMPLATES.values())
