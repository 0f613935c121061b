#!/usr/bin/env python3
"""
web_remote.py  –  web UI + diagnostics + remote control

Endpoints
---------
/               → HTML page with buttons, overlay text, diagnostics, and link to /log
/overlay        → JSON array of overlay text lines
/state          → JSON object of the playback state
/diag, /data    → JSON object of diagnostic metrics
/action?cmd=…   → inject control commands (pause, resume, toggle, progress,
                  scroll, overlay, quit)
/log            → contents of the log file (if present)
"""

from __future__ import annotations
import http.server
import socketserver
import threading
import urllib.parse
import json
import logging
import math
import time
import os
import traceback
import psutil
import platform
from typing import TYPE_CHECKING, Any

from events   import EventManager
from overlays import overlay_lines
import config

if TYPE_CHECKING:                       # avoid circular import at runtime
    from app import SequencePlayer

log = logging.getLogger(__name__)

# ── diagnostics refresh cadence ───────────────────────────────────────────
_last_diag_time = 0.0
_diag_interval  = getattr(config, "DIAG_REFRESH_INTERVAL", 1.0)

# ── global diagnostic store ───────────────────────────────────────────────
monitor_data: dict[str, Any] = {
    "cpu_percent":       0.0,
    "cpu_per_core":      [],
    "mem_used":          "0 MB",
    "mem_total":         "0 MB",
    "proc_rss":          "0 MB",
    "script_uptime":     "0d 00:00:00",
    "load_avg":          "",
    "last_http_crash":   "",
    "python_version":    platform.python_version(),
}

_script_start = time.monotonic()


# ── helpers ────────────────────────────────────────────────────────────────
def _fmt_duration(secs: float) -> str:
    d, rem = divmod(int(secs), 86400)
    h, rem = divmod(rem, 3600)
    m, s   = divmod(rem, 60)
    return f"{d}d {h:02}:{m:02}:{s:02}"


def _maybe_update_diagnostics() -> None:
    global _last_diag_time
    now = time.monotonic()
    if now - _last_diag_time >= _diag_interval:
        _last_diag_time = now
        _update_diagnostics()


def _update_diagnostics() -> None:
    """Refresh CPU, memory, uptime, load, etc. in `monitor_data`."""
    # CPU
    per_core = psutil.cpu_percent(percpu=True)
    avg_cpu  = sum(per_core) / len(per_core) if per_core else 0.0
    monitor_data["cpu_percent"]  = round(avg_cpu, 1)
    monitor_data["cpu_per_core"] = [round(p, 1) for p in per_core]
    # Memory (decoded frames live in this process)
    vm = psutil.virtual_memory()
    monitor_data["mem_used"]  = f"{vm.used // 1024**2} MB"
    monitor_data["mem_total"] = f"{vm.total // 1024**2} MB"
    monitor_data["proc_rss"]  = f"{psutil.Process().memory_info().rss // 1024**2} MB"
    # Uptime
    monitor_data["script_uptime"] = _fmt_duration(time.monotonic() - _script_start)
    # Load average
    try:
        la = os.getloadavg()
        monitor_data["load_avg"] = ", ".join(f"{x:.2f}" for x in la)
    except (AttributeError, OSError):
        monitor_data["load_avg"] = "N/A"


def state_dict(player: "SequencePlayer") -> dict[str, Any]:
    seq = player.sequence
    return {
        "mode":          seq.mode.value,
        "paused":        seq.paused,
        "progress":      seq.progress,
        "frame":         seq.current_frame,
        "previous":      seq.previous_frame,
        "length":        seq.sequence_length,
        "running":       seq.running,
        "loaded":        seq.store.loaded_count(),
        "total":         len(seq.store),
        "preload_failed": seq.preload.failed,
        "scroll_offset": player.host.scroll_offset(),
    }


def parse_action(query: str) -> dict | None:
    """
    Turn an /action query string into an action dict.
    Returns None for an unknown command; raises ValueError on a bad value.
    """
    qs  = urllib.parse.parse_qs(query)
    cmd = qs.get("cmd", [""])[0]

    if cmd == "pause":
        return {"type": "pause"}
    if cmd == "resume":
        return {"type": "resume"}
    if cmd == "toggle":
        return {"type": "toggle_pause"}
    if cmd == "overlay":
        return {"type": "toggle_overlay"}
    if cmd == "quit":
        return {"type": "quit"}
    if cmd == "progress":
        value = float(qs.get("value", [""])[0])
        if not math.isfinite(value):
            raise ValueError("progress must be finite")
        return {"type": "set_progress", "value": value}
    if cmd == "scroll":
        # relative move in pixels (can be ±)
        dy = float(qs.get("dy", [""])[0])
        if not math.isfinite(dy):
            raise ValueError("dy must be finite")
        return {"type": "scroll", "delta": dy}
    return None


# ── reusable threaded HTTP server ──────────────────────────────────────────
class ReusableTCPServer(socketserver.ThreadingMixIn, http.server.HTTPServer):
    daemon_threads      = True
    allow_reuse_address = True


# ── request handler ────────────────────────────────────────────────────────
class RemoteHandler(http.server.BaseHTTPRequestHandler):
    def log_message(self, fmt, *args):
        log.debug("http %s - " + fmt, self.address_string(), *args)

    def do_GET(self):
        parsed = urllib.parse.urlparse(self.path)
        path, qs = parsed.path, parsed.query
        player = self.server.player   # type: ignore[attr-defined]

        if path == "/":
            return self._serve_html()
        if path == "/overlay":
            return self._serve_json(overlay_lines(player.sequence,
                                                  player.host.scroll_offset()))
        if path == "/state":
            return self._serve_json(state_dict(player))
        if path in ("/diag", "/data"):
            _maybe_update_diagnostics()
            return self._serve_json(monitor_data)
        if path == "/log":
            return self._serve_log()
        if path == "/action":
            return self._serve_action(qs)

        self.send_error(404, "Not found")

    # ── helpers for each route ───────────────────────────────────────────
    def _serve_html(self):
        b = HTML_PAGE.encode("utf-8")
        self.send_response(200)
        self.send_header("Content-Type", "text/html")
        self.send_header("Content-Length", str(len(b)))
        self.end_headers()
        self.wfile.write(b)

    def _serve_json(self, obj: Any):
        b = json.dumps(obj).encode("utf-8")
        self.send_response(200)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(b)))
        self.end_headers()
        self.wfile.write(b)

    def _serve_log(self):
        try:
            with open(config.LOG_FILE, "rb") as f:
                data = f.read()
        except OSError:
            return self.send_error(404, "Log file not found")
        self.send_response(200)
        self.send_header("Content-Type", "text/plain; charset=utf-8")
        self.send_header("Content-Length", str(len(data)))
        self.end_headers()
        self.wfile.write(data)

    def _serve_action(self, query: str):
        try:
            act = parse_action(query)
        except ValueError:
            return self.send_error(400, "Invalid value")
        if act is None:
            return self.send_error(400, "Unknown cmd")

        EventManager.post(act)
        self.send_response(204)
        self.end_headers()


# ── simple HTML UI ─────────────────────────────────────────────────────────
HTML_PAGE = """
<!doctype html><html><head><meta charset="utf-8">
<title>Sequence Remote & Diagnostics</title>
<style>
 body{background:#000;color:#0f0;font-family:monospace;padding:1em;}
 a.button{display:inline-block;margin:4px;padding:6px 12px;border:1px solid #0f0;
          text-decoration:none;color:#0f0;}
 pre{margin:0.5em 0;font-family:monospace;}
</style></head><body>
<h2>Sequence Player Remote</h2>
<!-- playback -->
<a class="button" href="/action?cmd=pause">❚❚ Pause</a>
<a class="button" href="/action?cmd=resume">▶ Resume</a>
<a class="button" href="/action?cmd=toggle">Toggle</a>

<!-- manual progress -->
<a class="button" href="/action?cmd=progress&value=0">0%</a>
<a class="button" href="/action?cmd=progress&value=0.25">25%</a>
<a class="button" href="/action?cmd=progress&value=0.5">50%</a>
<a class="button" href="/action?cmd=progress&value=0.75">75%</a>
<a class="button" href="/action?cmd=progress&value=1">100%</a>

<!-- scroll -->
<a class="button" href="/action?cmd=scroll&dy=-600">▲ Scroll</a>
<a class="button" href="/action?cmd=scroll&dy=600">▼ Scroll</a>

<!-- misc -->
<a class="button" href="/action?cmd=overlay">Toggle overlay</a>
<a class="button" href="/action?cmd=quit">Quit</a>
<a class="button" href="/log">View log</a>

<div><h3>Playback</h3><pre id="overlay"></pre></div>
<div><h3>State</h3><pre id="state"></pre></div>
<div><h3>Diagnostics</h3><pre id="diag"></pre></div>

<script>
 const table = obj => Object.entries(obj)
   .map(([k, v]) => k.padEnd(20, " ") + v).join("\\n");

 async function poll(){
   try {
     const [ov, st, dg] = await Promise.all(
       ["/overlay", "/state", "/diag"].map(u => fetch(u).then(r => r.json())));
     document.getElementById("overlay").textContent = ov.join("\\n");
     document.getElementById("state").textContent   = table(st);
     document.getElementById("diag").textContent    = table(dg);
   } catch(e){
     console.error(e);
   }
 }
 setInterval(poll, 250);
 poll();
</script>
</body></html>
"""


# ── server bootstrap with auto-restart ────────────────────────────────────
def start(player: "SequencePlayer", port: int = getattr(config, "WEB_PORT", 8080)):
    def _serve_loop():
        while True:
            try:
                with ReusableTCPServer(("", port), RemoteHandler) as httpd:
                    httpd.player = player
                    httpd.serve_forever()
            except Exception:
                monitor_data["last_http_crash"] = traceback.format_exc()
                log.exception("web remote crashed; restarting")
                time.sleep(1)

    threading.Thread(target=_serve_loop, name="web-remote", daemon=True).start()
    log.info("web remote & diagnostics listening on port %d", port)
