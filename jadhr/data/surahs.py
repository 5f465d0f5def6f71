"""
Surah name tables and name → number resolution.

Names coming back from the corpus source or the remote identifier vary in
spelling, diacritics and prefixes ("سُورَةُ البقرة", "البقرة آية 255",
"Al-Baqarah"), so resolution goes through several increasingly loose
strategies before giving up.
"""

from typing import Optional

from jadhr.config import get_settings
from jadhr.core.arabic import normalize_chapter_name
from jadhr.models import MatchResult

SURAH_COUNT = 114

# Ordinal = position + 1
SURAH_NAMES_ARABIC: tuple[str, ...] = (
    "الفاتحة", "البقرة", "آل عمران", "النساء", "المائدة", "الأنعام", "الأعراف", "الأنفال", "التوبة", "يونس",
    "هود", "يوسف", "الرعد", "إبراهيم", "الحجر", "النحل", "الإسراء", "الكهف", "مريم", "طه",
    "الأنبياء", "الحج", "المؤمنون", "النور", "الفرقان", "الشعراء", "النمل", "القصص", "العنكبوت", "الروم",
    "لقمان", "السجدة", "الأحزاب", "سبإ", "فاطر", "يس", "الصافات", "ص", "الزمر", "غافر",
    "فصلت", "الشورى", "الزخرف", "الدخان", "الجاثية", "الأحقاف", "محمد", "الفتح", "الحجرات", "ق",
    "الذاريات", "الطور", "النجم", "القمر", "الرحمن", "الواقعة", "الحديد", "المجادلة", "الحشر", "الممتحنة",
    "الصف", "الجمعة", "المنافقون", "التغابن", "الطلاق", "التحريم", "الملك", "القلم", "الحاقة", "المعارج",
    "نوح", "الجن", "المزمل", "المدثر", "القيامة", "الإنسان", "المرسلات", "النبإ", "النازعات", "عبس",
    "التكوير", "الإنفطار", "المطففين", "الإنشقاق", "البروج", "الطارق", "الأعلى", "الغاشية", "الفجر", "البلد",
    "الشمس", "الليل", "الضحى", "الشرح", "التين", "العلق", "القدر", "البينة", "الزلزلة", "العاديات",
    "القارعة", "التكاثر", "العصر", "الهمزة", "الفيل", "قريش", "الماعون", "الكوثر", "الكافرون", "النصر",
    "المسد", "الإخلاص", "الفلق", "الناس",
)

SURAH_NAMES_ENGLISH: dict[str, int] = {
    "Al-Fatihah": 1, "Al-Baqarah": 2, "Ali 'Imran": 3, "An-Nisa": 4, "Al-Ma'idah": 5,
    "Al-An'am": 6, "Al-A'raf": 7, "Al-Anfal": 8, "At-Tawbah": 9, "Yunus": 10,
    "Hud": 11, "Yusuf": 12, "Ar-Ra'd": 13, "Ibrahim": 14, "Al-Hijr": 15,
    "An-Nahl": 16, "Al-Isra": 17, "Al-Kahf": 18, "Maryam": 19, "Ta-Ha": 20,
    "Al-Anbiya": 21, "Al-Hajj": 22, "Al-Mu'minun": 23, "An-Nur": 24, "Al-Furqan": 25,
    "Ash-Shu'ara": 26, "An-Naml": 27, "Al-Qasas": 28, "Al-'Ankabut": 29, "Ar-Rum": 30,
    "Luqman": 31, "As-Sajdah": 32, "Al-Ahzab": 33, "Saba": 34, "Fatir": 35,
    "Ya-Sin": 36, "As-Saffat": 37, "Sad": 38, "Az-Zumar": 39, "Ghafir": 40,
    "Fussilat": 41, "Ash-Shuraa": 42, "Az-Zukhruf": 43, "Ad-Dukhan": 44, "Al-Jathiyah": 45,
    "Al-Ahqaf": 46, "Muhammad": 47, "Al-Fath": 48, "Al-Hujurat": 49, "Qaf": 50,
    "Adh-Dhariyat": 51, "At-Tur": 52, "An-Najm": 53, "Al-Qamar": 54, "Ar-Rahman": 55,
    "Al-Waqi'ah": 56, "Al-Hadid": 57, "Al-Mujadila": 58, "Al-Hashr": 59, "Al-Mumtahanah": 60,
    "As-Saff": 61, "Al-Jumu'ah": 62, "Al-Munafiqun": 63, "At-Taghabun": 64, "At-Talaq": 65,
    "At-Tahrim": 66, "Al-Mulk": 67, "Al-Qalam": 68, "Al-Haqqah": 69, "Al-Ma'arij": 70,
    "Nuh": 71, "Al-Jinn": 72, "Al-Muzzammil": 73, "Al-Muddaththir": 74, "Al-Qiyamah": 75,
    "Al-Insan": 76, "Al-Mursalat": 77, "An-Naba": 78, "An-Nazi'at": 79, "Abasa": 80,
    "At-Takwir": 81, "Al-Infitar": 82, "Al-Mutaffifin": 83, "Al-Inshiqaq": 84, "Al-Buruj": 85,
    "At-Tariq": 86, "Al-A'la": 87, "Al-Ghashiyah": 88, "Al-Fajr": 89, "Al-Balad": 90,
    "Ash-Shams": 91, "Al-Layl": 92, "Ad-Duha": 93, "Ash-Sharh": 94, "At-Tin": 95,
    "Al-'Alaq": 96, "Al-Qadr": 97, "Al-Bayyinah": 98, "Az-Zalzalah": 99, "Al-'Adiyat": 100,
    "Al-Qari'ah": 101, "At-Takathur": 102, "Al-'Asr": 103, "Al-Humazah": 104, "Al-Fil": 105,
    "Quraysh": 106, "Al-Ma'un": 107, "Al-Kawthar": 108, "Al-Kafirun": 109, "An-Nasr": 110,
    "Al-Masad": 111, "Al-Ikhlas": 112, "Al-Falaq": 113, "An-Nas": 114,
}

# Normalized Arabic name -> ordinal, in mushaf order
_ARABIC_INDEX: dict[str, int] = {
    normalize_chapter_name(name): i for i, name in enumerate(SURAH_NAMES_ARABIC, start=1)
}
_ENGLISH_INDEX: dict[str, int] = {
    name.lower(): number for name, number in SURAH_NAMES_ENGLISH.items()
}
_ENGLISH_BY_NUMBER: dict[int, str] = {
    number: name for name, number in SURAH_NAMES_ENGLISH.items()
}


def resolve_chapter_number(name: str | None) -> int:
    """
    Map a surah name to its number.

    Strategies, in order:
    1. Exact match of the normalized Arabic name ("سورة" prefix stripped)
    2. First Arabic table entry contained in the normalized input
    3. Exact case-insensitive match against the romanized table
    4. First romanized table entry contained in the input (case-insensitive)

    Substring scans take the first hit in table order, so a short name that
    is part of a longer input ("ص", "ق") can win over the intended surah.

    Args:
        name: Surah name in Arabic or romanized form

    Returns:
        Surah number (1-114), or 0 if the name cannot be resolved
    """
    if not name or not name.strip():
        return 0

    normalized = normalize_chapter_name(name.strip())
    if normalized:
        number = _ARABIC_INDEX.get(normalized)
        if number:
            return number

        for key, number in _ARABIC_INDEX.items():
            if key in normalized:
                return number

    english = name.strip().lower()
    number = _ENGLISH_INDEX.get(english)
    if number:
        return number

    for key, number in _ENGLISH_INDEX.items():
        if key in english:
            return number

    return 0


def _check_surah_id(surah_id: int) -> None:
    if surah_id < 1 or surah_id > SURAH_COUNT:
        raise ValueError(f"Invalid surah_id: {surah_id}. Must be 1-{SURAH_COUNT}.")


def get_surah_name(surah_id: int) -> str:
    """
    Get the Arabic name of a surah.

    Args:
        surah_id: Surah number (1-114)

    Returns:
        Arabic name of the surah
    """
    _check_surah_id(surah_id)
    return SURAH_NAMES_ARABIC[surah_id - 1]


def get_english_name(surah_id: int) -> str:
    """Get the romanized name of a surah (1-114)."""
    _check_surah_id(surah_id)
    return _ENGLISH_BY_NUMBER[surah_id]


def result_chapter_number(result: MatchResult) -> int:
    """
    Surah number of a MatchResult.

    Uses the number carried by the result when present (corpus matches),
    otherwise resolves the surah name.
    """
    if result.chapter_number:
        return result.chapter_number
    return resolve_chapter_number(result.chapter_name)


def reading_url(result: MatchResult, template: Optional[str] = None) -> Optional[str]:
    """
    Link to read the whole surah online.

    Returns:
        URL built from the resolved surah number, or None if the surah name
        cannot be resolved
    """
    number = result_chapter_number(result)
    if not number:
        return None
    return (template or get_settings().reading_url_template).format(chapter=number)
