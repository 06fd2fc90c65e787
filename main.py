"""Launch the Tone Lens web interface"""
from config import logger
from src.ui.app_gradio import demo

if __name__ == "__main__":
    logger.info("Starting Tone Lens UI")
    demo.queue().launch()
