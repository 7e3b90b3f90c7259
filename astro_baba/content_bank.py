"""Phrase pools for the daily horoscope.

Selection is always done on the English pools so that a given seed picks the
same slots in every language; Hindi output maps each picked line through
``HI_PHRASES``.
"""

from __future__ import annotations

LEADS = [
    "Today favors Momentum with crisp first steps. Your natural drive works best when anchored to one clear priority before noon.",
    "Today favors Clarity & Centering with a clean first move.",
    "Today favors Grounded Focus — fewer tabs, deeper attention.",
    "Today favors Listening & Patience — let inputs shape the next step.",
    "Today favors Strategic Planning — sketch the next 3–6 months.",
    "Today favors Relationship Warmth — short honest check-ins go far.",
    "Today favors Pragmatic Care — body, sleep, budgeting, tiny wins.",
    "Today favors Creative Spark — test a playful idea quickly.",
    "Today favors Learning — one micro-skill compounds quietly.",
    "Today favors Renewal & Cleanup — small resets make room for growth.",
    "Today favors Courageous Outreach — send that message/pitch.",
    "Today favors Stewardship & Savings — tighten one small leak.",
    "Today favors Health & Balance — pace yourself and hydrate.",
]

OPP_POOL = [
    "Ship one starter task before lunch to unlock afternoon flow.",
    "Touch base with a senior/mentor for a 30-sec checkpoint.",
    "Draft a quick 3–6-month outline so today fits a bigger arc.",
    "Do a 10-minute inbox trim to lower noise.",
    "Have one honest check-in with a key person.",
    "Make a tiny improvement to your budgeting/saving.",
    "Invest 20 minutes in a health micro-habit.",
    "Journal one page to clear mental fog.",
    "Learn one micro-skill you’ll reuse this week.",
    "Polish one thing already working instead of adding new.",
]

CAUT_POOL = [
    "Don’t accept every request — protect a 2-hour deep-work block.",
    "Skip unplanned purchases sparked by mood.",
    "Avoid promising timelines you haven’t pressure-tested.",
    "Don’t overfill the calendar — leave white space.",
    "Limit multitasking during crucial work.",
    "Avoid late-night screens if you need an early start.",
    "Don’t let perfect kill good — ship version one.",
    "Beware emotional emails; sleep on them.",
]

REMEDY_MAP = {
    0: "At sunrise, face east and offer gratitude to the Sun; keep 2 minutes of stillness.",
    1: "At dusk, light a diya and chant “Om Namah Shivaya” 11×.",
    2: "In the evening, recite Hanuman Chalisa once; offer a little sesame oil.",
    3: "Before work, chant “Om Gam Ganapataye” 21× for obstacle clearing.",
    4: "At sunset, read a few names from Vishnu Sahasranama; offer chana dal & turmeric.",
    5: "Light a pleasant fragrance; recite Sri Suktam or express gratitude for sufficiency.",
    6: "At sunset, chant Hanuman Chalisa; keep conduct calm and fair.",
}

COLORS = [
    "saffron",
    "leaf green",
    "amber",
    "turquoise",
    "coral",
    "royal blue",
    "maroon",
    "violet",
    "silver",
    "teal",
    "indigo",
    "crimson",
    "pearl white",
    "charcoal",
]

QUOTES = [
    "“What you do every day matters more than what you do once in a while.” — Gretchen Rubin",
    "“The best way out is always through.” — Robert Frost",
    "“Act as if what you do makes a difference. It does.” — William James",
    "“Energy flows where attention goes.” — Tony Robbins",
    "“Small deeds done are better than great deeds planned.” — Peter Marshall",
    "“Simplicity is the ultimate sophistication.” — Leonardo da Vinci",
    "“Well done is better than well said.” — Benjamin Franklin",
]

AFFIRMATIONS = [
    "I move with calm focus and steady courage.",
    "I choose clarity, kindness, and consistent effort.",
    "I honour my energy and channel it wisely.",
    "I welcome good opportunities and act with grace.",
    "I am disciplined, patient, and quietly powerful.",
    "I make small steps that compound into big gains.",
]

MOODS = [
    "Rise & shine — keep your heart light.",
    "Center and breathe — pace the day gently.",
    "Ground and glow — steady beats flashy.",
    "Open and kind — your warmth attracts support.",
    "Calm and clear — pick one thing and finish it.",
]

# key: "MM-DD"
FIXED_DAYS: dict[str, dict[str, tuple[str, str]]] = {
    "01-01": {
        "en": ("New Year’s Day", "Fresh starts and clean intentions."),
        "hi": ("नववर्ष", "नए संकल्प और शुभ आरंभ।"),
    },
    "01-26": {
        "en": ("Republic Day (India)", "Honour unity and civic virtue."),
        "hi": ("गणतंत्र दिवस", "एकता और नागरिक धर्म का मान।"),
    },
    "08-15": {
        "en": ("Independence Day (India)", "Gratitude for freedom; act with responsibility."),
        "hi": ("स्वतंत्रता दिवस", "स्वाधीनता का आभार; उत्तरदायित्व से कार्य करें।"),
    },
    "10-02": {
        "en": ("Gandhi Jayanti", "Simple living, high thinking—practice ahimsa today."),
        "hi": ("गाँधी जयंती", "सादा जीवन, उच्च विचार—अहिंसा का अभ्यास।"),
    },
    "12-25": {
        "en": ("Christmas", "Peace and goodwill to all."),
        "hi": ("क्रिसमस", "शांति और सद्भावना।"),
    },
}

HI_PHRASES: dict[str, str] = {
    # leads
    LEADS[0]: "आज गति का दिन है, स्पष्ट पहले कदमों के साथ। आपकी स्वाभाविक ऊर्जा तब सबसे अच्छा काम करती है जब वह दोपहर से पहले एक स्पष्ट प्राथमिकता से जुड़ी हो।",
    LEADS[1]: "आज स्पष्टता और एकाग्रता का दिन है, एक साफ़ पहले कदम के साथ।",
    LEADS[2]: "आज स्थिर फोकस का दिन है — कम भटकाव, गहरा ध्यान।",
    LEADS[3]: "आज सुनने और धैर्य का दिन है — मिली जानकारी को अगला कदम तय करने दें।",
    LEADS[4]: "आज रणनीतिक योजना का दिन है — अगले 3–6 महीनों की रूपरेखा बनाएँ।",
    LEADS[5]: "आज संबंधों में ऊष्मा का दिन है — छोटी ईमानदार बातचीत बहुत असर करती है।",
    LEADS[6]: "आज व्यावहारिक देखभाल का दिन है — शरीर, नींद, बजट, छोटी-छोटी जीत।",
    LEADS[7]: "आज रचनात्मक चिंगारी का दिन है — एक खिलंदड़े विचार को जल्दी परखें।",
    LEADS[8]: "आज सीखने का दिन है — एक सूक्ष्म कौशल चुपचाप बढ़ता जाता है।",
    LEADS[9]: "आज नवीनीकरण और सफ़ाई का दिन है — छोटे सुधार विकास के लिए जगह बनाते हैं।",
    LEADS[10]: "आज साहसी संपर्क का दिन है — वह संदेश/प्रस्ताव भेज दें।",
    LEADS[11]: "आज संरक्षण और बचत का दिन है — एक छोटी रिसाव बंद करें।",
    LEADS[12]: "आज स्वास्थ्य और संतुलन का दिन है — अपनी गति संभालें और पानी पीते रहें।",
    # opportunities
    OPP_POOL[0]: "दोपहर भोजन से पहले एक प्रारंभिक काम पूरा करें ताकि दोपहर का प्रवाह खुले।",
    OPP_POOL[1]: "किसी वरिष्ठ/मार्गदर्शक से 30-सेकंड का चेकपॉइंट लें।",
    OPP_POOL[2]: "आज को बड़े प्रवाह में फिट करने के लिए 3–6 माह की एक त्वरित रूपरेखा बनाएँ।",
    OPP_POOL[3]: "शोर कम करने के लिए 10 मिनट में इनबॉक्स साफ़ करें।",
    OPP_POOL[4]: "किसी महत्वपूर्ण व्यक्ति से एक ईमानदार बातचीत करें।",
    OPP_POOL[5]: "अपने बजट/बचत में एक छोटा सुधार करें।",
    OPP_POOL[6]: "स्वास्थ्य की एक सूक्ष्म आदत में 20 मिनट लगाएँ।",
    OPP_POOL[7]: "मानसिक धुंध हटाने के लिए एक पृष्ठ जर्नल लिखें।",
    OPP_POOL[8]: "एक सूक्ष्म कौशल सीखें जिसे आप इस सप्ताह फिर उपयोग करेंगे।",
    OPP_POOL[9]: "कुछ नया जोड़ने के बजाय पहले से चल रही किसी चीज़ को निखारें।",
    # cautions
    CAUT_POOL[0]: "हर अनुरोध स्वीकार न करें — 2 घंटे का गहन-कार्य समय सुरक्षित रखें।",
    CAUT_POOL[1]: "मूड में की गई अनियोजित खरीद से बचें।",
    CAUT_POOL[2]: "ऐसी समयसीमाओं का वादा न करें जिन्हें आपने परखा नहीं है।",
    CAUT_POOL[3]: "कैलेंडर मत ठूँसें — थोड़ा खाली समय छोड़ें।",
    CAUT_POOL[4]: "महत्वपूर्ण काम के दौरान मल्टीटास्किंग सीमित रखें।",
    CAUT_POOL[5]: "अगर आपको सुबह जल्दी शुरू करना है तो रात देर तक स्क्रीन से बचें।",
    CAUT_POOL[6]: "पूर्णता के लालच में अच्छे को मत मारें — संस्करण 1 जारी करें।",
    CAUT_POOL[7]: "भावनात्मक ईमेल से सावधान रहें; भेजने से पहले एक रात रुकें।",
    # remedies
    REMEDY_MAP[0]: "सूर्योदय पर पूर्वमुख होकर सूर्य को कृतज्ञता अर्पित करें; 2 मिनट शांत बैठें।",
    REMEDY_MAP[1]: "संध्या में दीया जलाएँ और “ॐ नमः शिवाय” 11 बार जपें।",
    REMEDY_MAP[2]: "संध्या में हनुमान चालीसा एक बार पढ़ें; थोड़ा तिल का तेल अर्पित करें।",
    REMEDY_MAP[3]: "कार्य से पहले “ॐ गं गणपतये” 21 बार जप करें — विघ्न शमन हेतु।",
    REMEDY_MAP[4]: "सूर्यास्त पर विष्णु सहस्रनाम के कुछ नाम पढ़ें; चना दाल और हल्दी अर्पित करें।",
    REMEDY_MAP[5]: "सुगंधित धूप/दीप जलाएँ; श्री सूक्त का पाठ करें या पर्याप्तता के लिए कृतज्ञता व्यक्त करें।",
    REMEDY_MAP[6]: "सूर्यास्त पर हनुमान चालीसा जपें; आचरण शांत और न्यायपूर्ण रखें।",
    # quotes
    QUOTES[0]: "“आप रोज़ जो करते हैं, वह कभी-कभार किए गए काम से अधिक मायने रखता है।” — ग्रेचेन रुबिन",
    QUOTES[1]: "“बाहर निकलने का सबसे अच्छा रास्ता हमेशा उसके बीच से होकर जाता है।” — रॉबर्ट फ्रॉस्ट",
    QUOTES[2]: "“ऐसे कार्य करें मानो आपके काम से फ़र्क पड़ता है। सच में पड़ता है।” — विलियम जेम्स",
    QUOTES[3]: "“ऊर्जा वहीं बहती है जहाँ ध्यान जाता है।” — टोनी रॉबिन्स",
    QUOTES[4]: "“किए गए छोटे काम, योजना में रखे बड़े कामों से बेहतर हैं।” — पीटर मार्शल",
    QUOTES[5]: "“सरलता ही परम परिष्कार है।” — लियोनार्डो दा विंची",
    QUOTES[6]: "“अच्छी तरह किया गया काम, अच्छी तरह कही गई बात से बेहतर है।” — बेंजामिन फ्रैंकलिन",
    # affirmations
    AFFIRMATIONS[0]: "मैं शांत एकाग्रता और स्थिर साहस के साथ आगे बढ़ता/बढ़ती हूँ।",
    AFFIRMATIONS[1]: "मैं स्पष्टता, दयालुता और निरंतर प्रयास चुनता/चुनती हूँ।",
    AFFIRMATIONS[2]: "मैं अपनी ऊर्जा का सम्मान करता/करती हूँ और उसे समझदारी से लगाता/लगाती हूँ।",
    AFFIRMATIONS[3]: "मैं अच्छे अवसरों का स्वागत करता/करती हूँ और शालीनता से कार्य करता/करती हूँ।",
    AFFIRMATIONS[4]: "मैं अनुशासित, धैर्यवान और शांत रूप से सशक्त हूँ।",
    AFFIRMATIONS[5]: "मैं छोटे कदम उठाता/उठाती हूँ जो बड़े लाभ में बदलते हैं।",
    # moods
    MOODS[0]: "उठिए और चमकिए — मन को हल्का रखें।",
    MOODS[1]: "केंद्रित हों और साँस लें — दिन की गति सौम्य रखें।",
    MOODS[2]: "स्थिर रहें और दीप्ति फैलाएँ — स्थिरता दिखावे से बेहतर है।",
    MOODS[3]: "खुले और दयालु रहें — आपकी ऊष्मा सहयोग को आकर्षित करती है।",
    MOODS[4]: "शांत और स्पष्ट रहें — एक काम चुनें और उसे पूरा करें।",
}


def hindi_variant(line: str) -> str:
    return HI_PHRASES.get(line, line)


def localized(line: str, lang: str) -> str:
    return hindi_variant(line) if lang == "hi" else line
