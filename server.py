"""
Forage Server  –  Flask + Server-Sent Events
============================================

Endpoints:
  POST /start        Start (or restart) simulation with JSON config body
  POST /stop         Stop the running simulation
  GET  /stream       SSE stream – browser subscribes here for live frames
  GET  /status       Current sim state as JSON
  GET  /world        Latest world snapshot as JSON

Run:
  python server.py
  # → http://localhost:5000
"""

import threading
import queue
import json

import numpy as np
from flask import Flask, Response, request, jsonify

from simulation import Simulation
from config import (
    NUM_CREATURES, NUM_FOOD, GENERATION_STEPS, MAX_GENERATIONS,
    MUTATION_RATE, MUTATION_STRENGTH, STREAM_EVERY_STEPS,
)

# ──────────────────────────────────────────────────────────────────────────────
app = Flask(__name__)

# Global simulation state
_sim_thread:  threading.Thread | None = None
_stop_event   = threading.Event()
_frame_queue  = queue.Queue(maxsize=200)   # holds dicts to stream
_sim_status   = {
    "running":    False,
    "generation": 0,
    "max_gen":    0,
    "cfg":        {},
    "error":      None,
}
_latest_frame = None
_status_lock  = threading.Lock()


# ──────────────────────────────────────────────────────────────────────────────
# CORS helper – allow a separately served frontend to call us
# ──────────────────────────────────────────────────────────────────────────────

@app.after_request
def add_cors(response):
    response.headers["Access-Control-Allow-Origin"]  = "*"
    response.headers["Access-Control-Allow-Headers"] = "Content-Type"
    response.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
    return response

@app.route("/", methods=["OPTIONS"])
@app.route("/<path:p>", methods=["OPTIONS"])
def preflight(p=""):
    return Response(status=200)


# ──────────────────────────────────────────────────────────────────────────────
# Simulation thread
# ──────────────────────────────────────────────────────────────────────────────

def _build_cfg(data: dict) -> dict:
    """Merge request JSON with defaults. Raises ValueError on a bad field."""
    seed = data.get("seed")
    cfg = {
        "num_creatures":     int(data.get("numCreatures",     NUM_CREATURES)),
        "num_food":          int(data.get("numFood",          NUM_FOOD)),
        "generation_length": int(data.get("generationLength", GENERATION_STEPS)),
        "max_generations":   int(data.get("maxGenerations",   MAX_GENERATIONS)),
        "mutation_rate":     float(data.get("mutationRate",     MUTATION_RATE)),
        "mutation_strength": float(data.get("mutationStrength", MUTATION_STRENGTH)),
        "stream_every":      max(1, int(data.get("streamEvery", STREAM_EVERY_STEPS))),
        "seed":              None if seed is None else int(seed),
    }

    if cfg["num_creatures"] < 1:
        raise ValueError(f"numCreatures must be >= 1, got {cfg['num_creatures']}")
    if cfg["num_food"] < 0:
        raise ValueError(f"numFood must be >= 0, got {cfg['num_food']}")
    if cfg["generation_length"] < 1:
        raise ValueError(
            f"generationLength must be >= 1, got {cfg['generation_length']}")
    if not 0.0 <= cfg["mutation_rate"] <= 1.0:
        raise ValueError(
            f"mutationRate must be in [0, 1], got {cfg['mutation_rate']}")
    if not cfg["mutation_strength"] >= 0.0:
        raise ValueError(
            f"mutationStrength must be >= 0, got {cfg['mutation_strength']}")
    return cfg


def _publish(frame: dict, out_q: queue.Queue):
    global _latest_frame
    with _status_lock:
        _latest_frame = frame
        _sim_status["generation"] = frame.get("generation", _sim_status["generation"])
    # a slow or absent /stream reader loses the stalest frame, never the newest
    if out_q.full():
        try:
            out_q.get_nowait()
        except queue.Empty:
            pass
    out_q.put(frame)


def _sim_worker(cfg: dict, stop_evt: threading.Event, out_q: queue.Queue):
    """
    Own one Simulation for its whole run and push its frames into ``out_q``.

    Every run ends with a ``done`` frame. A ValueError (including
    ZeroFitnessError when nothing was eaten) is reported as an ``error``
    frame just before it.
    """
    with _status_lock:
        _sim_status["running"] = True
        _sim_status["error"]   = None

    sim = None
    try:
        rng = np.random.default_rng(cfg["seed"])
        sim = Simulation.random(
            rng,
            num_creatures     = cfg["num_creatures"],
            num_food          = cfg["num_food"],
            generation_length = cfg["generation_length"],
            mutation_rate     = cfg["mutation_rate"],
            mutation_strength = cfg["mutation_strength"],
        )
        _publish({"type": "frame", **sim.snapshot().as_dict()}, out_q)
        while not stop_evt.is_set() and sim.generation < cfg["max_generations"]:
            finished = sim.step(rng)
            if finished is not None or sim.generation_steps % cfg["stream_every"] == 0:
                _publish({"type": "frame", **sim.snapshot().as_dict()}, out_q)
    except ValueError as exc:
        with _status_lock:
            _sim_status["error"] = str(exc)
        out_q.put({"type": "error", "message": str(exc)})
    finally:
        with _status_lock:
            _sim_status["running"] = False
        generation = sim.generation if sim is not None else 0
        out_q.put({"type": "done", "generation": generation})


# ──────────────────────────────────────────────────────────────────────────────
# Routes
# ──────────────────────────────────────────────────────────────────────────────

@app.route("/start", methods=["POST"])
def start():
    global _sim_thread, _stop_event, _frame_queue, _latest_frame

    try:
        cfg = _build_cfg(request.get_json(force=True, silent=True) or {})
    except (TypeError, ValueError) as exc:
        return jsonify({"status": "rejected", "error": str(exc)}), 400

    # one simulation at a time: a new run replaces the old one
    _stop_event.set()
    if _sim_thread and _sim_thread.is_alive():
        _sim_thread.join(timeout=3)

    _stop_event  = threading.Event()
    _frame_queue = queue.Queue(maxsize=200)
    with _status_lock:
        _sim_status["generation"] = 0
        _sim_status["running"]    = False
        _sim_status["cfg"]        = cfg
        _sim_status["max_gen"]    = cfg["max_generations"]
        _latest_frame = None

    _sim_thread = threading.Thread(
        target=_sim_worker,
        args=(cfg, _stop_event, _frame_queue),
        daemon=True,
    )
    _sim_thread.start()
    return jsonify({"status": "started", "cfg": cfg})


@app.route("/stop", methods=["POST"])
def stop():
    _stop_event.set()
    return jsonify({"status": "stopped"})


@app.route("/status", methods=["GET"])
def status():
    with _status_lock:
        return jsonify(dict(_sim_status))


@app.route("/world", methods=["GET"])
def world():
    with _status_lock:
        frame = _latest_frame
    if frame is None:
        return jsonify({"error": "no simulation has produced a frame yet"}), 404
    return jsonify(frame)


@app.route("/stream", methods=["GET"])
def stream():
    """SSE endpoint – browser subscribes and receives frames as events."""
    frames = _frame_queue

    def event_gen():
        # first event confirms the subscription before any frame exists
        yield "data: {\"type\": \"connected\"}\n\n"

        while True:
            try:
                payload = frames.get(timeout=1)
                yield f"data: {json.dumps(payload)}\n\n"
                if payload.get("type") == "done":
                    break
            except queue.Empty:
                # idle between frames
                yield "data: {\"type\": \"ping\"}\n\n"

    return Response(
        event_gen(),
        mimetype="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",    # stream frames unbuffered through reverse proxies
        },
    )


# ──────────────────────────────────────────────────────────────────────────────

if __name__ == "__main__":
    print("=" * 50)
    print("  Forage Server  →  http://localhost:5000")
    print("  SSE stream     →  http://localhost:5000/stream")
    print("=" * 50)
    app.run(host="0.0.0.0", port=5000, threaded=True, debug=False)
