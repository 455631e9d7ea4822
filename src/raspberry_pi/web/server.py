"""
Web server - aiohttp application for the pit-side debug interface.
"""

import asyncio
import logging
from pathlib import Path

from aiohttp import web

from config import WEB_HOST, WEB_PORT
from control.config_mapping import ConfigLocked

logger = logging.getLogger(__name__)

# Path to static files and templates
WEB_DIR = Path(__file__).parent
STATIC_DIR = WEB_DIR / "static"
TEMPLATES_DIR = WEB_DIR / "templates"


class WebServer:
    """
    Debug web interface server.

    Provides:
    - Dashboard page
    - Match setup (alliance / starting side) between runs
    - Start button for an autonomous run
    - Mission status and telemetry
    - Parameter tuning
    - Camera stream (MJPEG)
    """

    def __init__(self, controller):
        """
        Args:
            controller: AutonomousController to drive and inspect
        """
        self.controller = controller
        self.app = web.Application()
        self._run_future: asyncio.Future | None = None
        self._setup_routes()
        self.app.on_cleanup.append(self._on_cleanup)

    def _setup_routes(self):
        """Configure routes."""
        # Pages
        self.app.router.add_get("/", self.index)

        # API
        self.app.router.add_get("/api/status", self.api_status)
        self.app.router.add_get("/api/telemetry", self.api_telemetry)
        self.app.router.add_get("/api/match", self.api_match_get)
        self.app.router.add_post("/api/match", self.api_match_set)
        self.app.router.add_post("/api/start", self.api_start)

        # Runtime parameters
        self.app.router.add_get("/api/params", self.api_params_get)
        self.app.router.add_post("/api/params", self.api_params_set)

        # Streams
        self.app.router.add_get("/stream/camera", self.stream_camera)

        # Static files
        if STATIC_DIR.exists():
            self.app.router.add_static("/static", STATIC_DIR)

    async def index(self, request):
        """Dashboard page."""
        html = self._render_template("index.html")
        return web.Response(text=html, content_type="text/html")

    async def api_status(self, request):
        """Current run status."""
        return web.json_response(self.controller.snapshot())

    async def api_telemetry(self, request):
        """Recent telemetry lines."""
        return web.json_response(self.controller.telemetry.to_list())

    async def api_match_get(self, request):
        return web.json_response(self.controller.setup.current.to_dict())

    async def api_match_set(self, request):
        """Apply an input event, e.g. {"x": true} or {"alliance": "blue"}."""
        try:
            event = await request.json()
        except ValueError:
            return web.json_response({"error": "Expected a JSON object"}, status=400)
        if not isinstance(event, dict):
            return web.json_response({"error": "Expected a JSON object"}, status=400)

        try:
            config = self.controller.setup.handle(event)
        except ConfigLocked as e:
            return web.json_response({"error": str(e)}, status=409)
        return web.json_response(config.to_dict())

    async def api_start(self, request):
        """Start an autonomous run in a worker thread."""
        if self.controller.is_running or (self._run_future and not self._run_future.done()):
            return web.json_response({"error": "Run already active"}, status=409)

        loop = asyncio.get_running_loop()
        self._run_future = loop.run_in_executor(None, self.controller.run)
        self._run_future.add_done_callback(self._on_run_done)
        logger.info("Autonomous run started from web")
        return web.json_response({"ok": True}, status=202)

    async def api_params_get(self, request):
        """Get current tunable parameters."""
        return web.json_response(self.controller.params.to_dict())

    async def api_params_set(self, request):
        """Update tunable parameters. Include _save=true to persist to disk."""
        if self.controller.is_running:
            return web.json_response({"error": "Cannot tune during a run"}, status=409)

        data = await request.json()
        save = data.pop("_save", False)
        self.controller.params.update(**data)

        if save:
            self.controller.params.save()

        return web.json_response(self.controller.params.to_dict())

    async def stream_camera(self, request):
        """MJPEG stream of camera with jewel boxes."""
        camera = self._get_camera()
        if camera is None:
            return web.Response(status=404, text="Camera not available")

        response = web.StreamResponse()
        response.content_type = "multipart/x-mixed-replace; boundary=frame"
        await response.prepare(request)

        try:
            while camera.is_running:
                jpeg = camera.get_jpeg_frame()
                if jpeg:
                    await response.write(
                        b"--frame\r\n"
                        b"Content-Type: image/jpeg\r\n\r\n"
                        + jpeg
                        + b"\r\n"
                    )
                await asyncio.sleep(0.05)  # ~20 FPS
        except (ConnectionResetError, ConnectionAbortedError):
            pass

        return response

    def _get_camera(self):
        hardware = self.controller.hardware
        if hardware is not None and hardware.camera is not None:
            return hardware.camera
        return None

    def _on_run_done(self, future: asyncio.Future):
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.error(f"Autonomous run aborted: {exc}", exc_info=exc)

    async def _on_cleanup(self, app):
        """Wait for an active run to finish before shutting down."""
        if self._run_future and not self._run_future.done():
            logger.info("Waiting for autonomous run to finish...")
            try:
                await self._run_future
            except Exception:
                logger.exception("Autonomous run failed during shutdown")

    def _render_template(self, name: str) -> str:
        """Render a template file."""
        template_path = TEMPLATES_DIR / name
        if template_path.exists():
            return template_path.read_text()

        # Fallback if template doesn't exist
        return f"""
        <!DOCTYPE html>
        <html>
        <head><title>Autonomous - {name}</title></head>
        <body>
            <h1>Autonomous Debug Interface</h1>
            <p>Template '{name}' not found. Create it at:</p>
            <pre>{template_path}</pre>
            <nav>
                <a href="/api/status">Status</a> |
                <a href="/api/telemetry">Telemetry</a> |
                <a href="/api/match">Match</a> |
                <a href="/stream/camera">Camera</a>
            </nav>
        </body>
        </html>
        """


def create_app(controller) -> web.Application:
    """Create the web application."""
    server = WebServer(controller)
    return server.app


async def run_server(controller, host=WEB_HOST, port=WEB_PORT):
    """Run the web server."""
    app = create_app(controller)
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, host, port)
    await site.start()
    logger.info(f"Web server running at http://{host}:{port}")
    return runner
