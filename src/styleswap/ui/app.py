"""Gradio UI for StyleSwap."""

import asyncio
import logging

import gradio as gr

from styleswap.core.config import config
from styleswap.core.prompts import BACKDROP_PRESETS, DEFAULT_PRESET

from .handlers import (
    connect_api_key,
    download_result,
    generate_backdrop,
    load_session,
    select_preset,
    start_over,
    update_custom_prompt,
    upload_image,
)
from .models import BILLING_DOCS_URL, GENERATE_LABEL, UIState
from .state import get_services

# Configure logging
logging.basicConfig(
    level=getattr(logging, config.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_ui() -> tuple[gr.Blocks, str]:
    """Create the Gradio UI.

    Returns:
        Tuple of (Gradio Blocks app, custom CSS string)
    """
    custom_css = """
    .key-card {
        max-width: 480px;
        margin: 48px auto;
        text-align: center;
    }
    .error-box {
        color: #dc2626;
    }
    """

    app = gr.Blocks(title="StyleSwap")

    with app:
        # Session state - one instance per user
        ui_state = gr.State(UIState())

        # Key screen, shown while the credential gate is blocked
        with gr.Group(visible=False, elem_classes="key-card") as gate_group:
            gr.Markdown(
                """
                ## 🔑 Connect your Gemini API key
                StyleSwap uses the **Gemini 3 Pro Image** model.
                Connect a key from a Google Cloud project with billing enabled to continue.
                """
            )
            api_key_input = gr.Textbox(
                label="API Key",
                type="password",
                placeholder="Paste your Gemini API key",
            )
            connect_btn = gr.Button("🔌 Connect API Key", variant="primary")
            gr.Markdown(f"[Learn about paid project keys]({BILLING_DOCS_URL})")

        with gr.Column(visible=True) as workspace_group:
            gr.Markdown(
                """
                # StyleSwap
                ### Give your product photo a brand new backdrop
                """
            )

            with gr.Row():
                # Left column: editor controls
                with gr.Column(scale=1):
                    upload = gr.File(
                        label="Product Photo (PNG, JPG up to 10MB)",
                        file_types=["image"],
                        type="filepath",
                    )
                    preset_radio = gr.Radio(
                        choices=[preset.name for preset in BACKDROP_PRESETS],
                        value=DEFAULT_PRESET.name,
                        label="Atmosphere Presets",
                    )
                    custom_prompt = gr.Textbox(
                        label="Custom Setting",
                        placeholder="Describe your perfect background...",
                        lines=3,
                    )
                    generate_btn = gr.Button(GENERATE_LABEL, variant="primary", interactive=False)
                    error_text = gr.Markdown(visible=False, elem_classes="error-box")

                # Right column: image workspace
                with gr.Column(scale=2):
                    status_text = gr.Markdown()
                    with gr.Row():
                        original_preview = gr.Image(label="Original", type="pil", interactive=False)
                        result_preview = gr.Image(label="Result", type="pil", interactive=False)

                    with gr.Row(visible=False) as result_actions:
                        reset_btn = gr.Button("↩️ Reset")
                        download_btn = gr.Button("⬇️ Download PNG", variant="primary")
                    download_file = gr.File(label="Download", visible=False, interactive=False)

            start_over_btn = gr.Button("↩️ Start Over", size="sm")

        render_outputs = [
            gate_group,
            workspace_group,
            original_preview,
            result_preview,
            status_text,
            error_text,
            generate_btn,
            result_actions,
            custom_prompt,
        ]

        app.load(fn=load_session, inputs=[ui_state], outputs=[*render_outputs, ui_state])

        connect_btn.click(
            fn=connect_api_key,
            inputs=[api_key_input, ui_state],
            outputs=[*render_outputs, ui_state],
        )

        upload.change(
            fn=upload_image,
            inputs=[upload, ui_state],
            outputs=[*render_outputs, ui_state],
        )

        preset_radio.change(
            fn=select_preset,
            inputs=[preset_radio, ui_state],
            outputs=[*render_outputs, ui_state],
        )

        custom_prompt.input(
            fn=update_custom_prompt,
            inputs=[custom_prompt, ui_state],
            outputs=[ui_state],
        )

        generate_btn.click(
            fn=generate_backdrop,
            inputs=[custom_prompt, ui_state],
            outputs=[*render_outputs, ui_state],
            trigger_mode="once",
        )

        for btn in (reset_btn, start_over_btn):
            btn.click(
                fn=start_over,
                inputs=[ui_state],
                outputs=[*render_outputs, upload, ui_state],
            ).then(
                fn=lambda: gr.update(value=None, visible=False),
                outputs=[download_file],
            )

        download_btn.click(
            fn=download_result,
            inputs=[ui_state],
            outputs=[download_file, ui_state],
        )

    return app, custom_css


def main():
    """Main entry point for the application."""
    logger.info("Starting StyleSwap...")
    logger.info(f"Configuration: {config.model_dump(exclude={'gemini_api_key'})}")

    # Query the credential capability once, before any session renders
    services = get_services()
    needs_credential = asyncio.run(services.gate.check_initial())
    logger.info(f"API key required at startup: {needs_credential}")

    app, custom_css = create_ui()

    logger.info(f"Launching Gradio UI on {config.gradio_server_name}:{config.gradio_server_port}")

    app.launch(
        server_name=config.gradio_server_name,
        server_port=config.gradio_server_port,
        share=config.gradio_share,
        show_error=True,
        inbrowser=False,
        css=custom_css,
        allowed_paths=[str(config.outputs_dir)],
    )


if __name__ == "__main__":
    main()
