"""UI event handlers for the StyleSwap workflow.

Every handler returns the full set of component updates produced by
:func:`render_workspace` followed by the session state, so the page always
re-renders from the workflow state instead of tracking it separately.
:func:`generate_backdrop` yields two such renders, one while the call is in
flight and one with the outcome.

Output order (see ``render_outputs`` in ``app.create_ui``):
    gate_group, workspace_group, original_preview, result_preview,
    status_text, error_text, generate_btn, result_actions, custom_prompt
"""

import asyncio
import io
import logging

import gradio as gr
from PIL import Image

from styleswap.core.codec import encode_image, parse_data_uri
from styleswap.core.errors import ImageReadError, PreconditionViolation
from styleswap.core.export import save_downloadable
from styleswap.core.models import GenerationStatus
from styleswap.core.prompts import get_preset_by_name

from .models import GENERATE_LABEL, GENERATING_LABEL, STATUS_CAPTIONS, UIState
from .state import get_services, initialize_ui_state

logger = logging.getLogger(__name__)


def _data_uri_to_pil(uri: str | None) -> Image.Image | None:
    """Decode a data URI for display. Undisplayable images show nothing."""
    if not uri:
        return None
    try:
        data, _ = parse_data_uri(uri)
        img = Image.open(io.BytesIO(data))
        img.load()
        return img
    except (ValueError, OSError) as e:
        logger.warning(f"Could not decode image for preview: {e}")
        return None


def _gate_blocked(action: str) -> bool:
    """Check the credential gate before a workspace action."""
    if get_services().gate.is_blocked:
        logger.warning(f"{action} requested while credential gate is blocked")
        return True
    return False


def _status_caption(state: UIState) -> str:
    workflow = state.orchestrator
    if workflow.status is GenerationStatus.IDLE and workflow.source_image is None:
        return STATUS_CAPTIONS["idle_empty"]
    return STATUS_CAPTIONS[workflow.status.value]


def render_workspace(state: UIState, notice: str | None = None) -> tuple:
    """Build component updates from the current workflow state.

    Args:
        state: Initialized UI state
        notice: Optional message shown in the error area instead of the
            workflow error (used for upload failures)

    Returns:
        Tuple of updates in the output order listed above
    """
    workflow = state.orchestrator
    blocked = get_services().gate.is_blocked

    error_message = notice
    if error_message is None and workflow.error is not None:
        error_message = workflow.error.message

    generating = workflow.is_generating
    return (
        gr.update(visible=blocked),
        gr.update(visible=not blocked),
        gr.update(value=_data_uri_to_pil(workflow.source_image.encoded_data if workflow.source_image else None)),
        gr.update(value=_data_uri_to_pil(workflow.result_image)),
        gr.update(value=f"**{_status_caption(state)}**"),
        gr.update(value=f"❌ {error_message}" if error_message else "", visible=bool(error_message)),
        gr.update(
            value=GENERATING_LABEL if generating else GENERATE_LABEL,
            interactive=workflow.can_generate,
        ),
        gr.update(visible=workflow.status is GenerationStatus.SUCCESS),
        gr.update(value=workflow.custom_prompt),
    )


def load_session(state: UIState | None) -> tuple:
    """Render the page for a new browser session."""
    state = initialize_ui_state(state)
    return (*render_workspace(state), state)


async def connect_api_key(api_key: str, state: UIState | None) -> tuple:
    """Handle the "Connect API Key" button on the key screen.

    Args:
        api_key: Key typed by the user (may be empty)
        state: UI state

    Returns:
        Render updates followed by the updated state
    """
    state = initialize_ui_state(state)
    services = get_services()

    services.key_store.stage_key(api_key)
    await services.gate.request_selection()

    return (*render_workspace(state), state)


async def upload_image(file_path: str | None, state: UIState | None) -> tuple:
    """Ingest a newly uploaded product photo.

    Args:
        file_path: Path of the uploaded file, None when the upload is cleared
        state: UI state

    Returns:
        Render updates followed by the updated state
    """
    state = initialize_ui_state(state)
    if not file_path:
        return (*render_workspace(state), state)
    if _gate_blocked("Upload"):
        return (*render_workspace(state), state)

    try:
        image = await encode_image(file_path)
    except ImageReadError as e:
        logger.warning(f"Upload failed: {e}")
        return (*render_workspace(state, notice=f"Could not read the uploaded photo: {e}"), state)

    state.orchestrator.ingest(image)
    state.last_download = None
    return (*render_workspace(state), state)


def select_preset(preset_name: str, state: UIState | None) -> tuple:
    """Select a backdrop preset from the preset radio (clears custom text)."""
    state = initialize_ui_state(state)
    if _gate_blocked("Preset selection"):
        return (*render_workspace(state), state)
    try:
        state.orchestrator.select_preset(get_preset_by_name(preset_name))
    except KeyError as e:
        logger.warning(f"Ignoring unknown preset: {e}")
    return (*render_workspace(state), state)


def update_custom_prompt(text: str, state: UIState | None) -> UIState:
    """Track edits of the custom backdrop text."""
    state = initialize_ui_state(state)
    state.orchestrator.set_custom_prompt(text)
    return state


async def generate_backdrop(custom_prompt: str, state: UIState | None):
    """Run one generation with the current photo and prompt.

    The first render is yielded while the call is in flight, so the page
    shows the Generating status with the generate button disabled. The
    second render shows the outcome.

    Args:
        custom_prompt: Current content of the custom backdrop textbox
        state: UI state

    Yields:
        Render updates followed by the updated state
    """
    state = initialize_ui_state(state)
    workflow = state.orchestrator
    workflow.set_custom_prompt(custom_prompt)

    if _gate_blocked("Generate"):
        yield (*render_workspace(state), state)
        return

    task = asyncio.create_task(workflow.start())
    # Let start() run up to the service call
    await asyncio.sleep(0)
    yield (*render_workspace(state), state)

    await task
    yield (*render_workspace(state), state)


def start_over(state: UIState | None) -> tuple:
    """Reset the workflow. Returns render updates, cleared upload, state."""
    state = initialize_ui_state(state)
    state.orchestrator.reset()
    state.last_download = None
    return (*render_workspace(state), gr.update(value=None), state)


def download_result(state: UIState | None) -> tuple[dict, UIState]:
    """Export the result as a PNG file for the browser to download.

    Args:
        state: UI state

    Returns:
        Tuple of (download file update, updated state)
    """
    state = initialize_ui_state(state)
    if _gate_blocked("Download"):
        return gr.update(value=None, visible=False), state
    try:
        download = state.orchestrator.export()
    except PreconditionViolation as e:
        logger.error(f"Download requested without a result: {e}")
        return gr.update(value=None, visible=False), state

    path = save_downloadable(download, get_services().config.outputs_dir)
    state.last_download = str(path)
    return gr.update(value=str(path), visible=True), state
