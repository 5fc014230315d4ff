"""Gradio web interface for ListingPack."""

from __future__ import annotations

import atexit
import contextlib
import logging
import os
import sys
import tempfile
import traceback

from .analysis import ImageAnalyzer
from .config import Config
from .context import PipelineContext
from .exceptions import AutoAdjustUnavailableError, ListingPackError
from .export import data_url_to_image, package_filename, package_to_zip
from .loader import RemoteImageLoader
from .logging_config import setup_logging
from .models import Agent, BrandingOverlay, Team
from .packager import PackageOrchestrator
from .session import EditSession
from .validators import validate_dimensions, validate_package_request

logger = logging.getLogger("listingpack.main")

# Optional Gradio import
try:
    import gradio as gr

    HAS_GRADIO = True
except ImportError:
    HAS_GRADIO = False
    logger.error("Gradio not installed. Run: pip install 'listingpack[ui]'")

# Temp file management
_temp_files: list[str] = []


def _cleanup_temp_files() -> None:
    """Clean up temporary files."""
    for f in _temp_files:
        with contextlib.suppress(OSError):
            os.unlink(f)
    _temp_files.clear()


atexit.register(_cleanup_temp_files)


def _branding(agent_url: str, team_url: str) -> BrandingOverlay | None:
    # Agent wins when both are filled in
    if agent_url and agent_url.strip():
        return BrandingOverlay(agent=Agent(id="agent", name="Agent", overlay_image=agent_url.strip()))
    if team_url and team_url.strip():
        return BrandingOverlay(team=Team(id="team", name="Team", overlay_logo=team_url.strip()))
    return None


def _selection_order(selected: list[str]) -> str:
    lines = []
    for i, url in enumerate(selected):
        tag = " (branding)" if i == 0 else ""
        lines.append(f"{i + 1}. `{url.rsplit('/', 1)[-1]}`{tag}")
    return "\n".join(lines)


def _analysis_table(session: EditSession) -> list[dict]:
    rows = []
    for url in session.photos:
        analysis = session.analyses.get(url)
        rows.append(
            {
                "url": url,
                "status": session.status(url).label or "OK",
                **(analysis.to_dict() if analysis else {}),
            }
        )
    return rows


def create_interface(context: PipelineContext) -> object:
    """Create Gradio interface for ListingPack."""
    loader = RemoteImageLoader(context)
    session = EditSession(analyzer=ImageAnalyzer(loader))
    orchestrator = PackageOrchestrator(context)

    with gr.Blocks(title="ListingPack - Social Image Packages") as interface:
        gr.Markdown(
            """
        # ListingPack - Social Image Packages

        1. **Paste** the listing's photo URLs and run the photo check
        2. **Fix** flagged photos with auto-adjust
        3. **Select** photos (the first one gets your branding) and an overlay
        4. **Generate** the 1080x1080 package and download it
        """
        )

        with gr.Row():
            with gr.Column(scale=1):
                listing_id = gr.Textbox(label="Listing / MLS ID", placeholder="e.g., X1234567")
                gallery_input = gr.Textbox(
                    label="Photo URLs",
                    lines=6,
                    placeholder="One URL per line, or space separated",
                )
                analyze_btn = gr.Button("Check Photos", variant="primary")
                analysis_json = gr.JSON(label="Photo Check")
                auto_adjust_btn = gr.Button("Auto-Adjust Flagged Photos", size="sm")

            with gr.Column(scale=1):
                selection = gr.CheckboxGroup(
                    choices=[], label="Photos to include (first picked gets the branding)"
                )
                selection_order = gr.Markdown("")
                agent_overlay = gr.Textbox(label="Agent overlay URL")
                team_overlay = gr.Textbox(label="Team overlay URL")
                generate_btn = gr.Button("GENERATE PACKAGE", variant="primary", size="lg")
                gallery = gr.Gallery(label="Package", columns=3, height=400, object_fit="contain")
                download_zip = gr.File(label="Download All (ZIP)")
                status = gr.Markdown("**Status:** Ready")

        def check_photos(raw: str) -> tuple:
            photos = session.start(raw or "")
            if not photos:
                return None, gr.update(choices=[], value=[]), "", "No image URLs found"
            session.run_analysis()
            flagged = sum(1 for url in photos if session.status(url).needs_review)
            return (
                _analysis_table(session),
                gr.update(choices=photos, value=[]),
                "",
                f"Checked {len(photos)} photos, {flagged} need review",
            )

        analyze_btn.click(
            check_photos,
            inputs=[gallery_input],
            outputs=[analysis_json, selection, selection_order, status],
        )

        def update_selection(checked: list) -> tuple:
            ordered = session.sync_selection(checked)
            return gr.update(value=ordered), _selection_order(ordered)

        selection.input(
            update_selection,
            inputs=[selection],
            outputs=[selection, selection_order],
        )

        def auto_adjust_flagged() -> tuple:
            adjusted, manual = 0, []
            for url in session.photos:
                if not session.status(url).needs_review:
                    continue
                try:
                    session.auto_adjust(url)
                    adjusted += 1
                except AutoAdjustUnavailableError:
                    manual.append(url)
            message = f"Auto-adjusted {adjusted} photo(s)"
            if manual:
                message += f"; {len(manual)} need a manual edit"
            return _analysis_table(session), message

        auto_adjust_btn.click(auto_adjust_flagged, outputs=[analysis_json, status])

        def generate(agent_url: str, team_url: str, mls_id: str) -> tuple:
            branding = _branding(agent_url, team_url)
            ordered = list(session.selected)
            try:
                validate_package_request(ordered, branding)
            except ListingPackError as e:
                return [], None, f"Error: {e}"

            try:
                _cleanup_temp_files()
                result = orchestrator.generate_package(
                    ordered,
                    session.edit_states,
                    branding,
                    (Config.TARGET_DIMENSION, Config.TARGET_DIMENSION),
                )

                gallery_items = [
                    (data_url_to_image(data_url), package_filename(mls_id, i))
                    for i, data_url in enumerate(result.successful_images)
                ]

                with tempfile.NamedTemporaryFile(
                    delete=False, suffix=".zip", prefix=f"{mls_id or 'listing'}_"
                ) as tmp:
                    tmp.write(package_to_zip(result.successful_images))
                    zip_path = tmp.name
                    _temp_files.append(zip_path)

                message = result.failure_message() or f"Generated {len(gallery_items)} images!"
                return gallery_items, zip_path, message

            except ListingPackError as e:
                return [], None, f"Error: {e}"
            except Exception as e:
                traceback.print_exc()
                return [], None, f"Unexpected error: {e}"

        generate_btn.click(
            generate,
            inputs=[agent_overlay, team_overlay, listing_id],
            outputs=[gallery, download_zip, status],
        )

    return interface


def main() -> None:
    """Main entry point."""
    setup_logging(os.environ.get("LISTINGPACK_LOG_LEVEL", "INFO"))

    logger.info("=" * 70)
    logger.info("LISTINGPACK - Social Image Packages")
    logger.info("=" * 70)

    if not HAS_GRADIO:
        logger.error("Gradio is required. Run: pip install 'listingpack[ui]'")
        sys.exit(1)

    validate_dimensions(Config.TARGET_DIMENSION, Config.TARGET_DIMENSION)

    logger.info("Starting web interface...")

    context = PipelineContext.from_env()
    try:
        interface = create_interface(context)
        interface.launch(
            server_name="0.0.0.0",
            server_port=7860,
            share=False,
            show_error=True,
        )
    except Exception as e:
        logger.error("Failed to start: %s", e)
        traceback.print_exc()
        sys.exit(1)
    finally:
        context.close()


if __name__ == "__main__":
    main()
