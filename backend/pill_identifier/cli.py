"""
Pill Identifier command line

Usage:
    pill-identifier identify tablets.jpg --language te --speak
    pill-identifier identify tablets.png --language en --translate-to hi
    pill-identifier voices
    pill-identifier serve --port 8000
"""

from pathlib import Path
from typing import Optional
import argparse
import sys

from .config.settings import AppConfig, get_default_config
from .cross_cutting.logging import setup_logging
from .cross_cutting.validation import detect_image_mime_type, validate_upload
from .domain.exceptions import DomainException, MissingApiKeyError, SpeechEngineUnavailableError
from .domain.value_objects.image_payload import EXTENSION_MIME_TYPES
from .domain.value_objects.language import supported_language_codes
from .application.services.identification_service import MedicineIdentificationService
from .application.presentation import IdentifierPageState, ResultView, ResultViewState
from .application.speech_player import SpeechPlayer, Notice


def print_notice(notice: Notice) -> None:
    marker = "!" if notice.level == "error" else "i"
    print(f"[{marker}] {notice.title}: {notice.message}", file=sys.stderr)


def print_view(view: ResultView, error_title: Optional[str] = None) -> None:
    print("=" * 60)
    print(f"    {error_title or view.title}")
    print("=" * 60)

    if view.state is ResultViewState.IDENTIFIED:
        print(f"Medicine: {view.medicine_name}")
        print()
        print("Uses:")
        print(view.uses)
    else:
        print(view.message)
        if view.hint:
            print()
            print(view.hint)


def speak(text: str, language: str) -> None:
    """Read `text` aloud with the platform engine; Ctrl+C stops."""
    from .infrastructure.tts.pyttsx3_engine import Pyttsx3SpeechEngine

    try:
        engine = Pyttsx3SpeechEngine()
    except SpeechEngineUnavailableError:
        engine = None

    player = SpeechPlayer(engine, on_notice=print_notice)
    try:
        player.toggle(text, language)
        if engine is not None:
            engine.join()
    except KeyboardInterrupt:
        # A second toggle stops the utterance
        player.toggle(text, language)
        if engine is not None:
            engine.join(timeout=2.0)
    finally:
        player.teardown()


def build_service(config: AppConfig) -> MedicineIdentificationService:
    from .main import build_generative_model
    return MedicineIdentificationService(build_generative_model(config), config.upload)


def cmd_identify(args: argparse.Namespace, config: AppConfig) -> int:
    path = Path(args.image)
    if not path.exists():
        print(f"Image file not found: {path}", file=sys.stderr)
        return 1

    mime_type = EXTENSION_MIME_TYPES.get(path.suffix.lower())
    if mime_type is None and path.is_file():
        # Unknown extension (.jfif, none at all): look at the content
        mime_type = detect_image_mime_type(path.read_bytes())

    ok, message = validate_upload(
        path.stat().st_size,
        mime_type,
        max_bytes=config.upload.max_bytes,
        allowed_mime_types=config.upload.allowed_mime_types,
    )
    if not ok:
        print(message, file=sys.stderr)
        return 1

    try:
        service = build_service(config)
    except MissingApiKeyError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 2

    language = args.language or config.upload.default_language
    page = IdentifierPageState(language=language)
    view = page.submit(
        lambda: service.identify_from_file(str(path), language, mime_type=mime_type),
        language,
    )
    print_view(view, error_title=page.error_title)

    if view.state is not ResultViewState.IDENTIFIED:
        return 1 if view.state is ResultViewState.ERROR else 0

    text = view.uses
    if args.translate_to:
        try:
            translation = service.translate(view.medicine_name, view.uses, args.translate_to)
        except DomainException as e:
            print(f"Translation failed: {e.message}", file=sys.stderr)
            return 1
        print()
        print(f"[{args.translate_to}] {translation.translated_medicine_name}")
        print(translation.translated_uses)
        text, language = translation.translated_uses, args.translate_to

    if args.speak:
        speak(text, language)

    return 0


def cmd_voices(args: argparse.Namespace, config: AppConfig) -> int:
    from .infrastructure.tts.pyttsx3_engine import Pyttsx3SpeechEngine

    try:
        engine = Pyttsx3SpeechEngine()
    except SpeechEngineUnavailableError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    voices = engine.get_voices()
    for voice in voices:
        print(f"{voice.lang or '?':<10} {voice.name}  ({voice.id})")
    print(f"\n{len(voices)} voices")
    return 0


def cmd_serve(args: argparse.Namespace, config: AppConfig) -> int:
    import uvicorn
    from .main import create_app

    config.server.host = args.host or config.server.host
    config.server.port = args.port or config.server.port
    uvicorn.run(create_app(config), host=config.server.host, port=config.server.port)
    return 0


def main(argv: Optional[list] = None) -> int:
    """Main entry point"""
    parser = argparse.ArgumentParser(
        prog="pill-identifier",
        description="Identify medicines from photos of tablet sheets",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        '--log-level', default=None,
        help='Logging level (overrides PILL_IDENTIFIER_LOG_LEVEL)'
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    language_codes = supported_language_codes()

    identify = subparsers.add_parser("identify", help="Identify the medicine in an image")
    identify.add_argument('image', help='Path to a .jpg, .png or .webp image (max 5MB)')
    identify.add_argument(
        '--language', '-l', choices=language_codes,
        help='Language for the uses text (default: PILL_IDENTIFIER_DEFAULT_LANGUAGE or te)'
    )
    identify.add_argument(
        '--translate-to', '-t', choices=language_codes,
        help='Also translate the result into this language'
    )
    identify.add_argument(
        '--speak', action='store_true',
        help='Read the uses aloud with the platform speech engine'
    )
    identify.set_defaults(handler=cmd_identify)

    voices = subparsers.add_parser("voices", help="List platform speech voices")
    voices.set_defaults(handler=cmd_voices)

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument('--host', type=str, help='Bind address')
    serve.add_argument('--port', type=int, help='Port')
    serve.set_defaults(handler=cmd_serve)

    args = parser.parse_args(argv)

    config = get_default_config()
    if args.log_level:
        config.logging.level = args.log_level.upper()
    if args.command != "serve":
        setup_logging(level=config.logging.level, log_file=config.logging.log_file)

    return args.handler(args, config)


if __name__ == "__main__":
    sys.exit(main())
