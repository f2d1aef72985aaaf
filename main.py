import argparse
import asyncio

from cardpoints.api.app import run as run_api
from cardpoints.config import configure_logging, settings
from cardpoints.presets.registry import CardPresetRegistry
from cardpoints.repository.auth import StaticAuthenticator
from cardpoints.services.orchestrator import RewardOrchestrator


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="CardPoints unified entrypoint")
    parser.add_argument(
        "mode",
        nargs="?",
        choices=["api", "presets", "seed"],
        default="api",
        help="Run mode: api (default), presets, seed",
    )
    parser.add_argument("--product", help="Card product id to seed (seed mode)")
    parser.add_argument("--preset", help="Preset key to seed from (seed mode)")
    parser.add_argument("--issuer", help="Card issuer, to pick the preset automatically (seed mode)")
    parser.add_argument("--name", help="Card name, to pick the preset automatically (seed mode)")
    return parser


def list_presets() -> None:
    for preset in CardPresetRegistry().list_presets():
        print(f"{preset.key}\t{preset.issuer} {preset.name}\t{len(preset.rules)} rule(s)")


def seed(product_id: str, preset_key: str | None, issuer: str | None = None, name: str | None = None) -> int:
    orchestrator = RewardOrchestrator.from_settings(settings, authenticator=StaticAuthenticator())
    if preset_key:
        return asyncio.run(orchestrator.bootstrap_from_preset(product_id, preset_key))
    return asyncio.run(orchestrator.bootstrap_if_available(product_id, issuer, name))


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()

    if args.mode == "api":
        run_api()
        return

    configure_logging()

    if args.mode == "presets":
        list_presets()
        return

    if not args.product or not (args.preset or (args.issuer and args.name)):
        parser.error("seed mode needs --product and either --preset or --issuer with --name")

    created = seed(args.product, args.preset, args.issuer, args.name)
    source = args.preset or f"{args.issuer} {args.name}"
    print(f"Seeded {created} rule(s) for {args.product} from {source}")


if __name__ == "__main__":
    main()
