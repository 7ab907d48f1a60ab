"""Main CLI entry point for Motion Studio.

Usage:
    python -m motion_studio.cli serve                         # Run the API server
    python -m motion_studio.cli provision                     # Create bucket and render function
    python -m motion_studio.cli generate "<prompt>"           # Render a video from a prompt
    python -m motion_studio.cli captions <video_url>          # Caption a video
    python -m motion_studio.cli captions <url> -s word-pop    # ...with a specific style
    python -m motion_studio.cli styles                        # List caption styles
"""

import argparse
import sys
import time

from rich.console import Console
from rich.table import Table

console = Console()


def _load(args: argparse.Namespace):
    from ..config import load_config

    config = load_config(args.config)
    if args.mock:
        config.render.backend = "mock"
        config.llm.provider = "mock"
        config.transcription.provider = "mock"
    return config


def cmd_serve(args: argparse.Namespace) -> int:
    """Run the HTTP API."""
    import uvicorn

    from ..web.backend.app import create_app

    config = _load(args)
    if args.host:
        config.server.host = args.host
    if args.port:
        config.server.port = args.port

    console.print(f"Starting Motion Studio on http://{config.server.host}:{config.server.port}")
    uvicorn.run(create_app(config), host=config.server.host, port=config.server.port, log_config=None)
    return 0


def cmd_provision(args: argparse.Namespace) -> int:
    """Ensure the render function and bucket exist."""
    from ..errors import MotionStudioError
    from ..render import ResourceProvisioner, get_render_backend

    config = _load(args)
    provisioner = ResourceProvisioner(get_render_backend(config), config.render)
    try:
        function, bucket = provisioner.provision()
    except MotionStudioError as e:
        console.print(f"[red]Error:[/red] {e}")
        return 1

    def state(existed: bool) -> str:
        return "already existed" if existed else "[green]newly created[/green]"

    console.print(f"Function: {function.function_name} ({state(function.already_existed)})")
    console.print(f"Bucket:   {bucket.bucket_name} ({state(bucket.already_existed)})")
    console.print(f"\nSet REMOTION_FUNCTION_NAME={function.function_name} in your .env")
    return 0


def _run_job(args: argparse.Namespace, submit) -> int:
    from ..errors import JobQueueFullError, RequestValidationError
    from ..pipeline import JobOrchestrator, JobStatus

    config = _load(args)
    orchestrator = JobOrchestrator(config)
    try:
        job_id = submit(orchestrator)
    except (RequestValidationError, JobQueueFullError) as e:
        console.print(f"[red]Error:[/red] {e}")
        orchestrator.shutdown(wait=False)
        return 1

    console.print(f"Job: [bold]{job_id}[/bold]")

    try:
        with console.status("Working...") as status:
            while True:
                job = orchestrator.get_status(job_id)
                if job is None or job.is_terminal:
                    break
                status.update(f"{job.step} ({job.progress:.0%})")
                time.sleep(1)
    finally:
        orchestrator.shutdown(wait=True)

    if job is None:
        console.print("[red]Job disappeared[/red]")
        return 1
    if job.status == JobStatus.ERROR:
        console.print(f"[red]Failed:[/red] {job.error}")
        return 1

    result = job.result
    if result.url is None:
        console.print("Nothing to render (no speech detected)")
    else:
        console.print(f"[green]Done:[/green] {result.url}")
        console.print(f"  Saved to {config.paths.videos_dir}/{job_id}.mp4")
    if result.words is not None:
        console.print(f"  {len(result.words)} word(s) transcribed")
    return 0


def cmd_generate(args: argparse.Namespace) -> int:
    """Render a video from a prompt."""
    return _run_job(args, lambda o: o.submit_render(args.prompt, style=args.style))


def cmd_captions(args: argparse.Namespace) -> int:
    """Caption an existing video."""
    return _run_job(args, lambda o: o.submit_captions(args.video_url, style=args.style, mode=args.mode))


def cmd_styles(args: argparse.Namespace) -> int:
    """List caption styles."""
    from ..captions.styles import default_registry

    config = _load(args)
    registry = default_registry(config.captions.default_style)

    table = Table(title="Caption styles")
    table.add_column("Style")
    table.add_column("Words")
    table.add_column("Highlight")
    table.add_column("Position")
    for style_id in registry.ids():
        style = registry.get(style_id)
        name = f"{style_id} (default)" if style_id == registry.default else style_id
        table.add_row(name, str(style.group_size or 1), style.highlight, style.position)
    console.print(table)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Motion Studio CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--config", default=None, help="Path to config.yaml")
    parser.add_argument("--mock", action="store_true", help="Use mock LLM, transcription and render backends")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # serve command
    serve_parser = subparsers.add_parser("serve", help="Run the API server")
    serve_parser.add_argument("--host", default=None, help="Host to bind to")
    serve_parser.add_argument("--port", type=int, default=None, help="Port to listen on")
    serve_parser.set_defaults(func=cmd_serve)

    # provision command
    provision_parser = subparsers.add_parser("provision", help="Create the render bucket and function")
    provision_parser.set_defaults(func=cmd_provision)

    # generate command
    generate_parser = subparsers.add_parser("generate", help="Render a video from a prompt")
    generate_parser.add_argument("prompt", help="What the video should show")
    generate_parser.add_argument("--style", default=None, help="Visual style hint")
    generate_parser.set_defaults(func=cmd_generate)

    # captions command
    captions_parser = subparsers.add_parser("captions", help="Caption an existing video")
    captions_parser.add_argument("video_url", help="Public URL of the source video")
    captions_parser.add_argument("-s", "--style", default=None, help="Caption style (see `styles`)")
    captions_parser.add_argument(
        "--mode",
        choices=["remotion", "burn"],
        default=None,
        help="Render remotely or burn subtitles locally with ffmpeg",
    )
    captions_parser.set_defaults(func=cmd_captions)

    # styles command
    styles_parser = subparsers.add_parser("styles", help="List caption styles")
    styles_parser.set_defaults(func=cmd_styles)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    from ..log import setup_logging

    setup_logging("DEBUG" if args.verbose else "INFO")
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
