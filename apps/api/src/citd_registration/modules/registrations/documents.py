"""
Registration Documents

Renders the certificate and the application form to PDF.

Each document is an HTML template plus a stylesheet and two logos. The
template is made self-contained (logos inlined as base64 data URLs, the
stylesheet spliced into <head>), loaded into a fresh Chromium context, and
filled in through field bindings before being printed to A4 PDF.

Field bindings are computed in Python so the exact content written into
each template element can be checked without launching a browser.
``TEMPLATE_FIELD_IDS`` is the contract between these bindings and the
template files: every listed element id must exist in the template.
"""

import asyncio
import base64
import enum
import html
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import NamedTuple

from playwright.async_api import Browser, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError

from citd_registration.core.storage import sanitize_name
from citd_registration.modules.registrations.exceptions import (
    DocumentRenderError,
    TemplateAssetError,
)
from citd_registration.modules.registrations.schemas import StampedRegistration

logger = logging.getLogger(__name__)


class DocumentKind(str, enum.Enum):
    CERTIFICATE = "certificate"
    APPLICATION_FORM = "application_form"


@dataclass(frozen=True)
class TemplateSpec:
    """Files and page setup for one document kind."""

    directory: str
    html_file: str
    css_file: str
    file_prefix: str
    landscape: bool
    # placeholder src attribute value -> logo file name
    logos: tuple[tuple[str, str], ...] = (
        ("msme.png", "msme.png"),
        ("citd main.png", "citd main.png"),
    )


TEMPLATES: dict[DocumentKind, TemplateSpec] = {
    DocumentKind.CERTIFICATE: TemplateSpec(
        directory="certificate",
        html_file="certificate.html",
        css_file="certificate.css",
        file_prefix="Certificate",
        landscape=True,
    ),
    DocumentKind.APPLICATION_FORM: TemplateSpec(
        directory="application_form",
        html_file="index.html",
        css_file="style.css",
        file_prefix="Application",
        landscape=False,
    ),
}

TEMPLATE_FIELD_IDS: dict[DocumentKind, tuple[str, ...]] = {
    DocumentKind.CERTIFICATE: (
        "cert-main-text",
        "cert-serial",
        "cert-course",
        "cert-start",
        "cert-end",
        "cert-issue-date",
        "cert-photo",
    ),
    DocumentKind.APPLICATION_FORM: (
        "course-name",
        "department",
        "duration",
        "from-date",
        "to-date",
        "applicant-name",
        "dob",
        "father-name",
        "mother-name",
        "address",
        "mobile",
        "email",
        "aadhar",
        "course_fees",
        "gender_male",
        "gender_female",
        "preview",
    ),
}

# Binding modes understood by APPLY_BINDINGS_JS
TEXT = "text"
HTML = "html"
VALUE = "value"
CHECK = "check"
SRC = "src"
SHOW = "show"
HIDE = "hide"


class FieldBinding(NamedTuple):
    selector: str
    mode: str
    value: str = ""


APPLY_BINDINGS_JS = """
(bindings) => {
    const missing = [];
    for (const b of bindings) {
        const el = document.querySelector(b.selector);
        if (!el) {
            missing.push(b.selector);
            continue;
        }
        switch (b.mode) {
            case "text": el.textContent = b.value; break;
            case "html": el.innerHTML = b.value; break;
            case "value": el.value = b.value; break;
            case "check": el.checked = true; break;
            case "src": el.src = b.value; break;
            case "show": el.style.display = "block"; break;
            case "hide": el.style.display = "none"; break;
        }
    }
    return missing;
}
"""


def format_date(value) -> str:
    """Reformat ``YYYY-MM-DD`` as ``DD-MM-YYYY``; other strings pass through."""
    if not value or not isinstance(value, str):
        return ""
    parts = value.split("-")
    if len(parts) != 3:
        return value
    year, month, day = parts
    return f"{day}-{month}-{year}"


def certificate_main_text(record: StampedRegistration) -> str:
    """
    Opening sentence of the certificate.

    "Mr." uses son-of phrasing, "Ms." daughter-of phrasing; any other value
    uses the combined phrasing without an honorific.
    """
    name = html.escape((record.applicant_name or "").upper())
    father = html.escape((record.father_name or "").upper())
    gender = record.gender or ""

    if gender == "Mr.":
        subject, relation = f"{gender} {name}", "S/o"
    elif gender == "Ms.":
        subject, relation = f"{gender} {name}", "D/o"
    else:
        subject, relation = name, "S/o / D/o"

    return (
        f"This is to certify that <strong>{subject}</strong> {relation} "
        f"<strong>{father}</strong> is awarded this certificate in recognition"
    )


def certificate_bindings(record: StampedRegistration) -> list[FieldBinding]:
    bindings = [
        FieldBinding("#cert-main-text", HTML, certificate_main_text(record)),
        FieldBinding("#cert-serial", TEXT, record.serial_number),
        FieldBinding(
            "#cert-course", TEXT, f"INTERNSHIP PROGRAMME ON {(record.course_name or '').upper()}"
        ),
        FieldBinding("#cert-start", TEXT, format_date(record.from_date)),
        FieldBinding("#cert-end", TEXT, format_date(record.to_date)),
        FieldBinding("#cert-issue-date", TEXT, format_date(record.to_date)),
    ]
    if record.photo:
        bindings.append(FieldBinding("#cert-photo", SRC, record.photo))
    return bindings


def _attribute_value(value: str) -> str:
    """Quote a value for use inside a CSS attribute selector."""
    return value.replace("\\", "\\\\").replace('"', '\\"')


def application_form_bindings(record: StampedRegistration) -> list[FieldBinding]:
    values = {
        "#course-name": record.course_name,
        "#department": record.department,
        "#duration": record.duration,
        "#from-date": record.from_date,
        "#to-date": record.to_date,
        "#applicant-name": record.applicant_name,
        "#dob": record.dob,
        "#father-name": record.father_name,
        "#mother-name": record.mother_name,
        "#address": record.address,
        "#mobile": record.mobile,
        "#email": record.email,
        "#aadhar": record.aadhar,
        "#course_fees": record.course_fees,
    }
    bindings = [FieldBinding(selector, VALUE, value or "") for selector, value in values.items()]

    if record.caste_category:
        selector = f'input[name="caste"][value="{_attribute_value(record.caste_category)}"]'
        bindings.append(FieldBinding(selector, CHECK))

    if record.education:
        first = record.education[0]
        bindings.extend(
            [
                FieldBinding('[name="edu_course"]', VALUE, first.course or ""),
                FieldBinding('[name="edu_school"]', VALUE, first.institution or ""),
                FieldBinding('[name="edu_spec"]', VALUE, first.specialization or ""),
                FieldBinding('[name="edu_year"]', VALUE, first.year or ""),
                FieldBinding('[name="edu_perc"]', VALUE, first.percentage or ""),
            ]
        )

    if record.gender == "Mr.":
        bindings.append(FieldBinding("#gender_male", CHECK))
    elif record.gender == "Ms.":
        bindings.append(FieldBinding("#gender_female", CHECK))

    if record.photo:
        bindings.append(FieldBinding("#preview", SRC, record.photo))
        bindings.append(FieldBinding("#preview", SHOW))

    bindings.append(FieldBinding(".submit-btn", HIDE))
    return bindings


BINDERS = {
    DocumentKind.CERTIFICATE: certificate_bindings,
    DocumentKind.APPLICATION_FORM: application_form_bindings,
}


def document_filename(kind: DocumentKind, applicant_name: str | None) -> str:
    """``<Prefix>-<Applicant_Name>-<nanosecond timestamp>.pdf``"""
    prefix = TEMPLATES[kind].file_prefix
    return f"{prefix}-{sanitize_name(applicant_name)}-{time.time_ns()}.pdf"


def _read_asset(path: Path, binary: bool = False):
    try:
        return path.read_bytes() if binary else path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise TemplateAssetError(path) from e
    except (OSError, UnicodeDecodeError) as e:
        raise TemplateAssetError(path, reason=str(e)) from e


def compose_document_html(templates_dir: Path, kind: DocumentKind) -> str:
    """
    Build the self-contained HTML for a document kind.

    Raises:
        TemplateAssetError: If the template, stylesheet or a logo is missing
    """
    template = TEMPLATES[kind]
    directory = Path(templates_dir) / template.directory

    document = _read_asset(directory / template.html_file)
    css = _read_asset(directory / template.css_file)

    for placeholder, filename in template.logos:
        encoded = base64.b64encode(_read_asset(directory / filename, binary=True)).decode("ascii")
        document = document.replace(
            f'src="{placeholder}"', f'src="data:image/png;base64,{encoded}"'
        )

    return document.replace("</head>", f"<style>{css}</style></head>", 1)


class DocumentRenderer:
    """
    Renders registration documents with a shared headless Chromium.

    The browser is launched once (``start``) and every render gets its own
    browser context, closed when the render finishes.
    """

    def __init__(self, templates_dir: Path, output_dir: Path, timeout_seconds: float = 30.0):
        self.templates_dir = Path(templates_dir)
        self.output_dir = Path(output_dir)
        self.timeout_seconds = timeout_seconds
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._start_lock = asyncio.Lock()

    async def start(self) -> None:
        async with self._start_lock:
            if self._browser is not None:
                return
            self.output_dir.mkdir(parents=True, exist_ok=True)
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(
                headless=True, args=["--no-sandbox"]
            )
            logger.info("Document renderer browser started")

    async def close(self) -> None:
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
            logger.info("Document renderer browser stopped")

    async def _print(
        self,
        kind: DocumentKind,
        document: str,
        bindings: list[FieldBinding],
        path: Path,
    ) -> None:
        context = await self._browser.new_context()
        try:
            page = await context.new_page()
            page.set_default_timeout(self.timeout_seconds * 1000)
            await page.set_content(document, wait_until="domcontentloaded")
            missing = await page.evaluate(APPLY_BINDINGS_JS, [b._asdict() for b in bindings])
            if missing:
                logger.warning(f"{kind.value} template is missing elements: {missing}")
            await page.pdf(
                path=str(path),
                format="A4",
                landscape=TEMPLATES[kind].landscape,
                print_background=True,
            )
        finally:
            await context.close()

    async def render(self, kind: DocumentKind, record: StampedRegistration) -> Path:
        """
        Render one document to a PDF in the output directory.

        Returns:
            Path of the written PDF

        Raises:
            TemplateAssetError: If a template asset is missing
            DocumentRenderError: If the browser fails or times out
        """
        document = await asyncio.to_thread(compose_document_html, self.templates_dir, kind)
        bindings = BINDERS[kind](record)

        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.output_dir / document_filename(kind, record.applicant_name)

        try:
            if self._browser is None:
                await self.start()
            await asyncio.wait_for(
                self._print(kind, document, bindings, path),
                timeout=self.timeout_seconds,
            )
        except TimeoutError as e:
            raise DocumentRenderError(kind.value, f"timed out after {self.timeout_seconds}s") from e
        except PlaywrightError as e:
            raise DocumentRenderError(kind.value, str(e)) from e

        logger.info(f"Generated {kind.value} PDF: {path}")
        return path
