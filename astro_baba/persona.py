"""Occupation -> persona bucket, plus the persona phrase pools."""

from __future__ import annotations

import re
from typing import Any, Optional

from astro_baba.seeded import hash_code

PERSONAS = ["self_employed", "job_working", "not_working", "homemaker", "student"]
DEFAULT_PERSONA = "not_working"

# Checked in order; the first bucket with a matching keyword wins.
# "not working" must be tested before "working".
_PERSONA_KEYWORDS: list[tuple[str, tuple[str, ...]]] = [
    ("not_working", ("not working", "unemployed", "break", "career break", "sabbatical", "looking")),
    ("self_employed", ("self", "self-employed", "self_employed", "business", "freelance", "freelancer", "entrepreneur")),
    ("job_working", ("job", "working", "employee", "office", "service", "it", "engineer", "teacher")),
    ("homemaker", ("home", "homemaker", "housewife", "house wife", "house-maker")),
    ("student", ("student", "college", "school", "university", "study", "studies")),
]


def normalize_persona(raw: Any) -> str:
    """Map free-text occupation onto one of the five persona buckets.

    Keywords match on word boundaries, so "IT consultant" lands in
    ``job_working`` while "university" does not. Anything unrecognised (or
    empty) is ``not_working``.
    """
    if not raw:
        return DEFAULT_PERSONA
    text = str(raw).strip().lower()
    if text in PERSONAS:
        return text
    for persona, keywords in _PERSONA_KEYWORDS:
        if any(re.search(rf"\b{re.escape(keyword)}\b", text) for keyword in keywords):
            return persona
    return DEFAULT_PERSONA


PERSONA_POOLS: dict[str, dict[str, list[Any]]] = {
    "self_employed": {
        "opportunities": [
            "Focus on networking and building partnerships that can lead to fruitful collaborations.",
            "Explore new markets or niches that may benefit from your unique skills.",
            "Consider offering workshops or sessions to share your expertise with others.",
            "Take time to reflect on your business goals and adjust your strategies accordingly.",
            "Seek feedback from clients to enhance your services and foster loyalty.",
            "Invest time in personal development to sharpen your skills and knowledge.",
        ],
        "cautions": [
            "Beware of overextending yourself; ensure you maintain a balanced workload.",
            "Be cautious with investments; carefully assess risks before proceeding.",
            "Avoid making impulsive decisions based on temporary emotions.",
            "Stay grounded and don't let short-term setbacks discourage you.",
            "Monitor your expenses closely to avoid financial strain.",
            "Limit distractions to maintain focus on your business objectives.",
        ],
        "remedy_addons": [
            {"gemstone": "Citrine", "reason": "Wearing Citrine can attract prosperity and success.",
             "hi": "सिट्रीन पहनने से समृद्धि और सफलता को आकर्षित किया जा सकता है।"},
            {"mantra": "Om Shreem Mahalakshmiyei Namah", "reason": "Chanting this mantra can enhance abundance in your endeavors.",
             "hi": "इस मंत्र का जाप आपके प्रयासों में प्रचुरता बढ़ा सकता है।"},
            {"gemstone": "Green Aventurine", "reason": "This stone supports growth and encourages risk-taking.",
             "hi": "यह पत्थर विकास का समर्थन करता है और जोखिम लेने के लिए प्रोत्साहित करता है।"},
        ],
    },
    "job_working": {
        "opportunities": [
            "Engage in team-building activities to strengthen workplace relationships.",
            "Look for opportunities to lead projects that showcase your skills.",
            "Consider professional development courses to enhance your qualifications.",
            "Be proactive in seeking mentorship to guide your career path.",
            "Take initiative in suggesting improvements to streamline processes.",
            "Celebrate small wins with your team to foster a positive environment.",
        ],
        "cautions": [
            "Stay cautious with office politics; avoid becoming overly involved.",
            "Guard against burnout by ensuring you take regular breaks.",
            "Be wary of overcommitting to tasks that may overwhelm you.",
            "Maintain professionalism in all communications to avoid misunderstandings.",
            "Keep your work-life balance in check to reduce stress.",
            "Avoid comparisons with colleagues that may lead to self-doubt.",
        ],
        "remedy_addons": [
            {"mantra": "Om Gan Ganapataye Namah", "reason": "Reciting this mantra helps remove obstacles and supports success.",
             "hi": "यह मंत्र पढ़ने से बाधाएं दूर होती हैं और सफलता मिलती है।"},
            {"gemstone": "Smoky Quartz", "reason": "This gemstone helps in maintaining focus and clarity at work.",
             "hi": "यह पत्थर कार्य में ध्यान और स्पष्टता बनाए रखने में मदद करता है।"},
            {"mantra": "Om Namo Narayanaya", "reason": "This mantra brings steadiness to long working weeks.",
             "hi": "यह मंत्र लंबे कामकाजी सप्ताहों में स्थिरता लाता है।"},
        ],
    },
    "not_working": {
        "opportunities": [
            "Use this time to explore your hobbies and interests more deeply.",
            "Consider volunteering for community activities to gain new experiences.",
            "Take online courses to learn new skills that interest you.",
            "Reflect on your goals and aspirations for future job opportunities.",
            "Network with friends who may have leads on job openings.",
            "Start a small project or craft that brings you joy and fulfillment.",
        ],
        "cautions": [
            "Avoid isolating yourself; stay connected with friends and family.",
            "Be mindful of procrastination; set daily goals to stay productive.",
            "Don't let negative thoughts hinder your confidence.",
            "Stay open to new opportunities, even if they differ from your plans.",
            "Limit screen time to maintain mental well-being.",
            "Be cautious about overspending if on a tight budget.",
        ],
        "remedy_addons": [
            {"gemstone": "Amethyst", "reason": "Amethyst promotes calmness and clarity during transitions.",
             "hi": "अमेथिस्ट सुकून और स्पष्टता को बढ़ावा देता है।"},
            {"mantra": "Om Namo Narayanaya", "reason": "This mantra can bring peace and guidance in your journey.",
             "hi": "यह मंत्र आपके मार्ग में शांति और मार्गदर्शन ला सकता है।"},
            {"gemstone": "Rose Quartz", "reason": "Rose Quartz encourages self-love and emotional healing.",
             "hi": "गुलाब क्वार्ट्ज आत्म-प्रेम और भावनात्मक उपचार को प्रोत्साहित करता है।"},
        ],
    },
    "homemaker": {
        "opportunities": [
            "Explore new recipes or cooking techniques to enhance your culinary skills.",
            "Consider starting a garden to grow your own herbs and vegetables.",
            "Engage in DIY projects to beautify your living space.",
            "Connect with other homemakers for shared experiences and support.",
            "Plan family activities that foster bonding and joy.",
            "Take time for self-care to recharge and maintain balance.",
        ],
        "cautions": [
            "Avoid overcommitting to social obligations that drain your energy.",
            "Be cautious when making major household purchases; plan accordingly.",
            "Limit distractions during family time to enhance connections.",
            "Keep an eye on household budgets to avoid overspending.",
            "Stay patient with family members; effective communication is key.",
            "Be wary of neglecting your personal interests amidst daily chores.",
        ],
        "remedy_addons": [
            {"gemstone": "Carnelian", "reason": "Carnelian can bring energy and motivation to your daily tasks.",
             "hi": "कार्नेलियन आपकी दैनिक कार्यों में ऊर्जा और प्रेरणा ला सकता है।"},
            {"mantra": "Om Shanti", "reason": "Chanting this mantra can create a peaceful home environment.",
             "hi": "इस मंत्र का जाप एक शांतिपूर्ण घर का वातावरण बना सकता है।"},
            {"gemstone": "Tiger's Eye", "reason": "This stone helps in maintaining balance and focus in daily life.",
             "hi": "यह पत्थर दैनिक जीवन में संतुलन और ध्यान बनाए रखने में मदद करता है।"},
        ],
    },
    "student": {
        "opportunities": [
            "Take advantage of study groups to enhance learning and collaboration.",
            "Explore new subjects that pique your interest.",
            "Participate in extracurricular activities to develop new skills.",
            "Seek guidance from teachers for academic improvement.",
            "Plan your study schedules to maximize productivity.",
            "Connect with peers to share insights and support each other.",
        ],
        "cautions": [
            "Be mindful of procrastination; stay focused on your studies.",
            "Avoid comparing yourself with others; everyone has their own pace.",
            "Limit distractions from social media during study hours.",
            "Keep a balanced approach to academics and personal life.",
            "Stay organized to avoid last-minute stress before exams.",
            "Be cautious with your time management; prioritize effectively.",
        ],
        "remedy_addons": [
            {"gemstone": "Aquamarine", "reason": "Aquamarine enhances clarity and calmness in studies.",
             "hi": "एक्वामरीन अध्ययन में स्पष्टता और शांति बढ़ाता है।"},
            {"mantra": "Om Saraswati Namah", "reason": "Chanting this mantra can enhance knowledge and wisdom.",
             "hi": "इस मंत्र का जाप ज्ञान और बुद्धि को बढ़ा सकता है।"},
            {"gemstone": "Fluorite", "reason": "Fluorite aids in focus and decision-making during studies.",
             "hi": "फ्लोरोइट अध्ययन के दौरान ध्यान और निर्णय लेने में मदद करता है।"},
        ],
    },
}


def _rotate(items: list[Any], want: int, seed: int) -> list[Any]:
    if not items:
        return []
    start = seed % len(items)
    return [items[(start + i) % len(items)] for i in range(min(want, len(items)))]


def remedy_addon_line(addon: dict[str, Any], lang: str = "en") -> str:
    label = addon.get("gemstone") or addon.get("mantra") or ""
    reason = addon.get("hi") if lang == "hi" and addon.get("hi") else addon.get("reason", "")
    return f"{label}: {reason}" if label else reason


def persona_lines(persona: str, sign: str, seed_key: Optional[str] = None) -> dict[str, Any]:
    """Rotated persona picks: three opportunities, three cautions, one remedy add-on."""
    bucket = normalize_persona(persona)
    pool = PERSONA_POOLS[bucket]
    seed = hash_code(seed_key or f"{sign}|{bucket}")
    return {
        "persona": bucket,
        "opportunities": _rotate(pool["opportunities"], 3, seed),
        "cautions": _rotate(pool["cautions"], 3, seed),
        "remedy_addons": _rotate(pool["remedy_addons"], 1, seed),
    }
