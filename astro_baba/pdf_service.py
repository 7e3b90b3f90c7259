import base64
import binascii
import json
import logging
import re
import subprocess
import time
from io import BytesIO
from pathlib import Path
from typing import Any, Optional

import httpx
from reportlab.lib import colors
from reportlab.lib.enums import TA_JUSTIFY, TA_LEFT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.platypus import HRFlowable, Image, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from astro_baba.reports import BrandConfig, ReportDocument

logger = logging.getLogger("astro_baba")

MODULE_DIR = Path(__file__).resolve().parent
REPO_ROOT = MODULE_DIR.parent

# ------------------------------------------------------------------------------
# Latin + Devanagari font setup
# ------------------------------------------------------------------------------
DEVANAGARI_REGULAR_CANDIDATES = [
    MODULE_DIR / "fonts" / "NotoSansDevanagari-Regular.ttf",
    REPO_ROOT / "assets" / "fonts" / "NotoSansDevanagari-Regular.ttf",
]
DEVANAGARI_BOLD_CANDIDATES = [
    MODULE_DIR / "fonts" / "NotoSansDevanagari-Bold.ttf",
    REPO_ROOT / "assets" / "fonts" / "NotoSansDevanagari-Bold.ttf",
]
SYSTEM_DEVANAGARI_FONT_CANDIDATES = [
    Path("/usr/share/fonts/truetype/noto/NotoSansDevanagari-Regular.ttf"),
    Path("/usr/share/fonts/opentype/noto/NotoSansDevanagari-Regular.ttf"),
    Path("/usr/share/fonts/truetype/lohit-devanagari/Lohit-Devanagari.ttf"),
    Path("/usr/share/fonts/truetype/fonts-deva-extra/kalimati.ttf"),
]

LATIN_FONT_REG = "Helvetica"
LATIN_FONT_BOLD = "Helvetica-Bold"
LATIN_FONT_ITALIC = "Helvetica-Oblique"

DEVANAGARI_FONT_AVAILABLE = False
HI_FONT_REG = LATIN_FONT_REG
HI_FONT_BOLD = LATIN_FONT_BOLD
HI_FONT_SOURCE: Optional[str] = None
PDF_FEATURE_AVAILABLE = True
PDF_FEATURE_ERROR: Optional[str] = None

LOGO_FETCH_TIMEOUT_SEC = 5.0
LOGO_MAX_BYTES = 2 * 1024 * 1024


def _first_existing_path(candidates: list[Path]) -> Optional[Path]:
    for candidate in candidates:
        if candidate.exists() and candidate.is_file():
            return candidate
    return None


def _run_fontconfig(args: list[str]) -> Optional[str]:
    try:
        result = subprocess.run(args, check=False, capture_output=True, text=True, timeout=2)
    except (OSError, subprocess.SubprocessError):
        return None
    if result.returncode != 0:
        return None
    return result.stdout


def _fontconfig_match(family: str) -> Optional[Path]:
    raw = (_run_fontconfig(["fc-match", "-f", "%{file}\n", family]) or "").strip()
    if not raw:
        return None
    candidate = Path(raw)
    # fc-match always answers with *something*; only accept Devanagari-looking files.
    if candidate.is_file() and re.search(r"devanagari|lohit|mangal|kalimati|gargi", candidate.name, re.I):
        return candidate
    return None


def _discover_system_devanagari_font() -> Optional[Path]:
    direct = _first_existing_path(SYSTEM_DEVANAGARI_FONT_CANDIDATES)
    if direct:
        return direct

    for family in ("Noto Sans Devanagari", "Lohit Devanagari", "Mangal"):
        matched = _fontconfig_match(family)
        if matched:
            return matched

    for line in (_run_fontconfig(["fc-list", ":lang=hi", "file"]) or "").splitlines():
        path_text = line.split(":", 1)[0].strip()
        if not path_text:
            continue
        candidate = Path(path_text)
        # TTC collections need a subfont index; plain TTF only.
        if candidate.is_file() and candidate.suffix.lower() == ".ttf":
            return candidate
    return None


def init_fonts() -> None:
    """Register a Devanagari font for Hindi reports; Latin text always uses Helvetica."""
    global DEVANAGARI_FONT_AVAILABLE, HI_FONT_REG, HI_FONT_BOLD, HI_FONT_SOURCE
    global PDF_FEATURE_AVAILABLE, PDF_FEATURE_ERROR

    DEVANAGARI_FONT_AVAILABLE = False
    HI_FONT_REG = LATIN_FONT_REG
    HI_FONT_BOLD = LATIN_FONT_BOLD
    HI_FONT_SOURCE = None
    PDF_FEATURE_AVAILABLE = True
    PDF_FEATURE_ERROR = None

    try:
        regular = _first_existing_path(DEVANAGARI_REGULAR_CANDIDATES)
        if regular:
            pdfmetrics.registerFont(TTFont("NotoDevanagari", str(regular)))
            bold = _first_existing_path(DEVANAGARI_BOLD_CANDIDATES)
            if bold:
                pdfmetrics.registerFont(TTFont("NotoDevanagari-Bold", str(bold)))
                HI_FONT_BOLD = "NotoDevanagari-Bold"
            else:
                HI_FONT_BOLD = "NotoDevanagari"
                logger.warning("NotoSansDevanagari-Bold.ttf not found; using regular weight for bold style.")
            HI_FONT_REG = "NotoDevanagari"
            HI_FONT_SOURCE = str(regular)
            DEVANAGARI_FONT_AVAILABLE = True
            logger.info("Bundled Devanagari font loaded: %s", regular)
            return

        system_font = _discover_system_devanagari_font()
        if system_font:
            pdfmetrics.registerFont(TTFont("DevanagariFallback", str(system_font)))
            HI_FONT_REG = "DevanagariFallback"
            HI_FONT_BOLD = "DevanagariFallback"
            HI_FONT_SOURCE = str(system_font)
            DEVANAGARI_FONT_AVAILABLE = True
            logger.info("System Devanagari font loaded: %s", system_font)
            return

        raise FileNotFoundError(
            f"No Devanagari font found in bundle candidates={DEVANAGARI_REGULAR_CANDIDATES} "
            f"or system candidates={SYSTEM_DEVANAGARI_FONT_CANDIDATES}."
        )
    except Exception as e:
        PDF_FEATURE_ERROR = str(e)
        logger.warning("Devanagari font unavailable; Hindi PDFs fall back to Helvetica: %s", e)


def fonts_for_lang(lang: str) -> tuple[str, str]:
    if lang == "hi":
        return HI_FONT_REG, HI_FONT_BOLD
    return LATIN_FONT_REG, LATIN_FONT_BOLD


def font_status() -> dict[str, Any]:
    return {
        "pdf_feature_available": PDF_FEATURE_AVAILABLE,
        "devanagari_font_available": DEVANAGARI_FONT_AVAILABLE,
        "latin": {"regular": LATIN_FONT_REG, "bold": LATIN_FONT_BOLD},
        "hi": {"regular": HI_FONT_REG, "bold": HI_FONT_BOLD, "source": HI_FONT_SOURCE},
        "error": PDF_FEATURE_ERROR,
    }


def load_pdf_layout_config() -> dict[str, Any]:
    """Layout defaults, optionally overridden by ``pdf_layout_config.json``."""
    config_path = MODULE_DIR / "pdf_layout_config.json"
    default_config = {
        "page": {"margin_top": 56, "margin_bottom": 56, "margin_left": 56, "margin_right": 56},
        "fonts": {"app_name": 20, "meta": 12, "chapter": 14, "subtitle": 13, "body": 12, "footer": 10},
        "colors": {
            "app_name": "#000000",
            "meta": "#333333",
            "body": "#000000",
            "rule": "#999999",
            "light_rule": "#DDDDDD",
            "footer": "#666666",
        },
        "logo": {"size": 80},
    }

    if not config_path.is_file():
        return default_config
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            loaded = json.load(f)
        if isinstance(loaded, dict):
            for key, value in loaded.items():
                if key in default_config and isinstance(value, dict):
                    default_config[key].update(value)
    except (OSError, ValueError) as e:
        logger.warning("PDF layout config load failed. Using defaults: %s", e)

    return default_config


def create_pdf_styles(lang: str = "en", config: Optional[dict[str, Any]] = None):
    config = config or load_pdf_layout_config()
    font_cfg = config["fonts"]
    color_cfg = config["colors"]
    font_reg, font_bold = fonts_for_lang(lang)
    # Oblique exists only for the built-in Latin face.
    font_footer = LATIN_FONT_ITALIC if font_reg == LATIN_FONT_REG else font_reg

    styles = getSampleStyleSheet()

    styles.add(ParagraphStyle(
        name="AppName",
        parent=styles["Normal"],
        fontName=LATIN_FONT_BOLD,
        fontSize=font_cfg["app_name"],
        leading=font_cfg["app_name"] + 4,
        textColor=colors.HexColor(color_cfg["app_name"]),
    ))

    styles.add(ParagraphStyle(
        name="MetaLine",
        parent=styles["Normal"],
        fontName=font_reg,
        fontSize=font_cfg["meta"],
        leading=font_cfg["meta"] + 4,
        textColor=colors.HexColor(color_cfg["meta"]),
        alignment=TA_LEFT,
    ))

    styles.add(ParagraphStyle(
        name="ChapterTitle",
        parent=styles["Heading1"],
        fontName=font_bold,
        fontSize=font_cfg["chapter"],
        leading=font_cfg["chapter"] + 4,
        spaceBefore=4,
        spaceAfter=6,
        textColor=colors.HexColor(color_cfg["body"]),
    ))

    styles.add(ParagraphStyle(
        name="Subtitle",
        parent=styles["Heading2"],
        fontName=font_bold,
        fontSize=font_cfg["subtitle"],
        leading=font_cfg["subtitle"] + 4,
        spaceBefore=2,
        spaceAfter=4,
        textColor=colors.HexColor(color_cfg["body"]),
    ))

    styles.add(ParagraphStyle(
        name="Body",
        parent=styles["Normal"],
        fontName=font_reg,
        fontSize=font_cfg["body"],
        leading=font_cfg["body"] + 5,
        alignment=TA_JUSTIFY,
        spaceAfter=7,
        textColor=colors.HexColor(color_cfg["body"]),
    ))

    styles.add(ParagraphStyle(
        name="BulletLine",
        parent=styles["Normal"],
        fontName=font_reg,
        fontSize=font_cfg["body"],
        leading=font_cfg["body"] + 4,
        leftIndent=4,
        textColor=colors.HexColor(color_cfg["body"]),
    ))

    styles.add(ParagraphStyle(
        name="Footer",
        parent=styles["Normal"],
        fontName=font_footer,
        fontSize=font_cfg["footer"],
        leading=font_cfg["footer"] + 3,
        textColor=colors.HexColor(color_cfg["footer"]),
    ))

    return styles


def _sanitize_pdf_text(value: Any) -> str:
    """ReportLab Paragraph safe text conversion."""
    if value is None:
        return ""
    text = str(value)
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def convert_markdown_bold(text: str) -> str:
    """Convert markdown **bold** markers to ReportLab-compatible <b> tags."""
    return re.sub(r"\*\*(.+?)\*\*", r"<b>\1</b>", text)


def paragraph_markup(text: str) -> str:
    return convert_markdown_bold(_sanitize_pdf_text(text).strip()).replace("\n", "<br/>")


# ------------------------------------------------------------------------------
# Logo
# ------------------------------------------------------------------------------
def strip_data_url_prefix(b64: Optional[str]) -> Optional[str]:
    if not b64:
        return None
    idx = b64.find("base64,")
    return b64[idx + 7:] if idx >= 0 else b64


def _validated_image(data: Optional[bytes]) -> Optional[bytes]:
    if not data:
        return None
    try:
        ImageReader(BytesIO(data)).getSize()
    except Exception as e:
        logger.warning("Logo bytes are not a readable image; skipping logo: %s", e)
        return None
    return data


async def load_logo_bytes(
    brand: Optional[BrandConfig],
    http_client: Optional[httpx.AsyncClient] = None,
    timeout: float = LOGO_FETCH_TIMEOUT_SEC,
) -> Optional[bytes]:
    """Decode ``logoBase64`` or fetch ``logoUrl``; any failure means no logo."""
    if brand is None:
        return None

    payload = strip_data_url_prefix(brand.logo_base64)
    if payload:
        try:
            return _validated_image(base64.b64decode(payload, validate=False))
        except (binascii.Error, ValueError) as e:
            logger.warning("Logo base64 decode failed; skipping logo: %s", e)
            return None

    if not brand.logo_url:
        return None

    owns_client = http_client is None
    client = http_client or httpx.AsyncClient(timeout=httpx.Timeout(timeout), follow_redirects=True)
    try:
        response = await client.get(brand.logo_url)
        if response.status_code != 200:
            logger.warning("Logo fetch returned status=%s url=%s; skipping logo", response.status_code, brand.logo_url)
            return None
        if len(response.content) > LOGO_MAX_BYTES:
            logger.warning("Logo too large (%s bytes); skipping logo", len(response.content))
            return None
        return _validated_image(response.content)
    except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
        logger.warning("Logo fetch failed url=%s; skipping logo: %s", brand.logo_url, e)
        return None
    finally:
        if owns_client:
            await client.aclose()


def _logo_flowable(logo_bytes: Optional[bytes], size: float) -> Optional[Image]:
    if not logo_bytes:
        return None
    try:
        reader = ImageReader(BytesIO(logo_bytes))
        width, height = reader.getSize()
        scale = min(size / float(width), size / float(height))
        return Image(BytesIO(logo_bytes), width=width * scale, height=height * scale)
    except Exception as e:
        logger.warning("Logo embedding failed; continuing without logo: %s", e)
        return None


# ------------------------------------------------------------------------------
# Document rendering
# ------------------------------------------------------------------------------
def pdf_filename(app_name: str, kind: str, sign: Optional[str] = None, now_ms: Optional[int] = None) -> str:
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    app = re.sub(r"\s+", "_", (app_name or "").strip()) or "Astro-Baba"
    parts = [app, kind] + ([sign] if sign else []) + [str(stamp)]
    return "_".join(parts) + ".pdf"


def _header_flowables(document: ReportDocument, styles, logo_bytes: Optional[bytes], config: dict[str, Any]) -> list:
    logo_size = float(config["logo"].get("size", 80))
    page_cfg = config["page"]
    content_width = A4[0] - float(page_cfg["margin_left"]) - float(page_cfg["margin_right"])
    app_name = Paragraph(_sanitize_pdf_text(document.brand.display_name), styles["AppName"])

    logo = _logo_flowable(logo_bytes, logo_size)
    if logo is None:
        header = [app_name]
    else:
        logo_col = logo_size + 14
        table = Table([[logo, app_name]], colWidths=[logo_col, content_width - logo_col])
        table.setStyle(TableStyle([
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ("LEFTPADDING", (0, 0), (-1, -1), 0),
            ("RIGHTPADDING", (0, 0), (-1, -1), 0),
            ("TOPPADDING", (0, 0), (-1, -1), 0),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 0),
        ]))
        header = [table]

    header.append(Spacer(1, 8))
    header.extend(Paragraph(_sanitize_pdf_text(line), styles["MetaLine"]) for line in document.meta_lines)
    header.append(Spacer(1, 10))
    header.append(HRFlowable(width="100%", thickness=0.8, color=colors.HexColor(config["colors"]["rule"])))
    header.append(Spacer(1, 10))
    return header


def build_story(document: ReportDocument, styles, logo_bytes: Optional[bytes], config: dict[str, Any]) -> list:
    story = _header_flowables(document, styles, logo_bytes, config)
    light_rule = colors.HexColor(config["colors"]["light_rule"])

    for section in document.sections:
        if section.heading:
            style = styles["ChapterTitle"] if section.level <= 1 else styles["Subtitle"]
            story.append(Paragraph(paragraph_markup(section.heading), style))
        for bullet in section.bullets:
            story.append(Paragraph(f"• {paragraph_markup(bullet)}", styles["BulletLine"]))
        if section.bullets:
            story.append(Spacer(1, 6))
        for paragraph in section.paragraphs:
            story.append(Paragraph(paragraph_markup(paragraph), styles["Body"]))
        if section.rule_after:
            story.append(Spacer(1, 4))
            story.append(HRFlowable(width="100%", thickness=0.6, color=light_rule))
            story.append(Spacer(1, 8))

    if document.footer:
        story.append(Spacer(1, 16))
        story.append(Paragraph(_sanitize_pdf_text(document.footer), styles["Footer"]))
    return story


def render_report_pdf(document: ReportDocument, logo_bytes: Optional[bytes] = None) -> bytes:
    """Lay out ``document`` on A4 and return the PDF bytes."""
    config = load_pdf_layout_config()
    page_cfg = config["page"]
    styles = create_pdf_styles(document.lang, config)
    footer_color = colors.HexColor(config["colors"]["footer"])
    rule_color = colors.HexColor(config["colors"]["light_rule"])

    with BytesIO() as buffer:
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=float(page_cfg["margin_right"]),
            leftMargin=float(page_cfg["margin_left"]),
            topMargin=float(page_cfg["margin_top"]),
            bottomMargin=float(page_cfg["margin_bottom"]),
            title=document.title,
            author=document.brand.display_name,
        )
        story = build_story(document, styles, logo_bytes, config)

        def _draw_page_chrome(canvas, _doc):
            canvas.saveState()
            canvas.setStrokeColor(rule_color)
            canvas.setLineWidth(0.5)
            canvas.line(_doc.leftMargin, _doc.bottomMargin - 12, A4[0] - _doc.rightMargin, _doc.bottomMargin - 12)
            canvas.setFont(LATIN_FONT_REG, 8)
            canvas.setFillColor(footer_color)
            canvas.drawString(_doc.leftMargin, _doc.bottomMargin - 24, document.brand.display_name)
            canvas.drawRightString(A4[0] - _doc.rightMargin, _doc.bottomMargin - 24, f"Page {canvas.getPageNumber()}")
            canvas.restoreState()

        doc.build(story, onFirstPage=_draw_page_chrome, onLaterPages=_draw_page_chrome)
        return buffer.getvalue()
