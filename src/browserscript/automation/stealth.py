"""Anti-automation launch configuration shared by the browser engines."""

WINDOW_WIDTH = 1920
WINDOW_HEIGHT = 1080

LAUNCH_ARGS = [
    "--disable-gpu",
    "--no-sandbox",
    "--disable-blink-features=AutomationControlled",
    f"--window-size={WINDOW_WIDTH},{WINDOW_HEIGHT}",
    "--disable-infobars",
    "--mute-audio",
    "--ignore-certificate-errors",
    "--disable-dev-shm-usage",
]

# Chromium defaults that announce automation to the page.
SUPPRESSED_DEFAULT_ARGS = ["--enable-automation"]

LANGUAGES = ["en-US", "en"]

STEALTH_SCRIPT = (
    "delete Object.getPrototypeOf(navigator).webdriver;"
    "window.chrome = { runtime: {} };"
    "Object.defineProperty(navigator, 'plugins', { get: () => [1, 2, 3, 4, 5] });"
    "Object.defineProperty(navigator, 'languages', { get: () => ['en-US', 'en'] });"
)

OVERLAY_SELECTORS = [
    'div[role="dialog"]',
    '.modal', '.overlay', '.popup', '.lightbox',
    '#popup', '#overlay', '#modal', '#lightbox',
    '.popup-overlay', '.modal-overlay', '.overlay-container',
    '.dialog', '.cookie-banner', '.cookie-consent',
    '.alert', '.notification', '.ad-banner', '.promo-banner',
    '.subscribe-popup', '.newsletter-signup',
    '.consent-banner', '.full-screen-overlay',
]


def _overlay_script() -> str:
    selectors = ", ".join(f"'{s}'" for s in OVERLAY_SELECTORS)
    return (
        "(() => {"
        " const hide = () => {"
        "   const selectors = [" + selectors + "];"
        "   for (const sel of selectors) {"
        "     document.querySelectorAll(sel).forEach(el => { el.style.display = 'none'; });"
        "   }"
        " };"
        " if (document.readyState === 'loading') {"
        "   document.addEventListener('DOMContentLoaded', hide);"
        " } else {"
        "   hide();"
        " }"
        "})()"
    )


OVERLAY_SCRIPT = _overlay_script()


def init_scripts(hide_overlays: bool = False) -> list:
    """Scripts to run in every new document, in order."""
    scripts = [STEALTH_SCRIPT]
    if hide_overlays:
        scripts.append(OVERLAY_SCRIPT)
    return scripts
