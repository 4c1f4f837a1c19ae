"""Tkinter desktop window."""

from __future__ import annotations

import os
from dataclasses import replace

from .config import DEFAULT_CONFIG_PATH, Config, load_config, save_config
from .errors import ConfigurationError, SourceUnavailable
from .logging_utils import setup_logging_for
from .models import MonitorSnapshot, PacingLevel
from .monitor import SpeechMonitor
from .pacing import format_elapsed
from .recorder import EnergySource

LIGHT_COLORS = {
    PacingLevel.GREEN: "#4caf50",
    PacingLevel.YELLOW: "#ffeb3b",
    PacingLevel.RED: "#f44336",
}
LIGHT_DIM = "#2a2f38"


def launch_gui(config_path: str = DEFAULT_CONFIG_PATH) -> None:
    import tkinter as tk
    from tkinter import ttk

    root = tk.Tk()
    root.title("Succinct")
    root.resizable(False, False)
    root.configure(bg="#0b0f14")

    style = ttk.Style(root)
    try:
        style.theme_use("clam")
    except tk.TclError:
        pass
    style.configure("TFrame", background="#0b0f14")
    style.configure("TLabel", background="#0b0f14", foreground="#d8e1ff")
    style.configure("Timer.TLabel", font=("Courier", 40, "bold"), foreground="#e6f1ff")
    style.configure(
        "Neo.TLabelframe",
        background="#0b0f14",
        foreground="#8bd3ff",
        bordercolor="#0f1a2a",
        lightcolor="#0f1a2a",
        darkcolor="#0f1a2a",
    )
    style.configure(
        "Neo.TLabelframe.Label",
        background="#0b0f14",
        foreground="#8bd3ff",
    )
    style.configure(
        "TButton",
        background="#132033",
        foreground="#e6f1ff",
        borderwidth=1,
        relief="flat",
    )
    style.map(
        "TButton",
        background=[("active", "#1b2a44")],
        foreground=[("active", "#ffffff")],
    )
    style.configure(
        "TEntry",
        fieldbackground="#111827",
        foreground="#e6f1ff",
        background="#111827",
        bordercolor="#1b2a44",
        lightcolor="#1b2a44",
        darkcolor="#1b2a44",
        relief="flat",
    )
    style.configure(
        "Neo.Horizontal.TProgressbar",
        troughcolor="#0f1a2a",
        background="#00e0ff",
        bordercolor="#0f1a2a",
        lightcolor="#00e0ff",
        darkcolor="#00b3cc",
    )

    config_error = None
    try:
        config = load_config(config_path)
    except ConfigurationError as exc:
        config = Config()
        config_error = str(exc)
    logger, log_path = setup_logging_for(config)
    logger.info("GUI starting (config %s, log %s)", os.path.abspath(config_path), log_path)
    if config_error:
        logger.error("%s; using defaults", config_error)

    timer_var = tk.StringVar(value=format_elapsed(0))
    speaking_var = tk.StringVar(value="NO")
    status_var = tk.StringVar(value="Waiting for microphone...")
    target_var = tk.StringVar(value=str(config.target_duration_ms // 1000))
    hold_var = tk.StringVar(value=str(config.silence_timeout_ms))
    sensitivity_var = tk.DoubleVar(value=config.threshold)
    sensitivity_label_var = tk.StringVar(value=f"{config.threshold:.2f}")

    main = ttk.Frame(root, padding=16)
    main.grid(row=0, column=0, sticky="nsew")

    session_frame = ttk.LabelFrame(main, text="Session", style="Neo.TLabelframe", padding=12)
    session_frame.grid(row=0, column=0, sticky="nsew")

    ttk.Label(session_frame, textvariable=timer_var, style="Timer.TLabel").grid(
        row=0, column=0, columnspan=3, pady=(0, 8)
    )
    ttk.Label(session_frame, text="Speaking:").grid(row=1, column=0, sticky="w")
    ttk.Label(session_frame, textvariable=speaking_var).grid(row=1, column=1, sticky="w")

    ttk.Label(session_frame, text="Target time (s):").grid(row=2, column=0, sticky="w", pady=4)
    target_entry = ttk.Entry(session_frame, textvariable=target_var, width=8)
    target_entry.grid(row=2, column=1, sticky="w")

    ttk.Label(session_frame, text="Hold silence (ms):").grid(row=3, column=0, sticky="w", pady=4)
    hold_entry = ttk.Entry(session_frame, textvariable=hold_var, width=8)
    hold_entry.grid(row=3, column=1, sticky="w")
    ttk.Label(session_frame, text="(wait before reset)").grid(row=3, column=2, sticky="w")

    ttk.Label(session_frame, text="Sensitivity:").grid(row=4, column=0, sticky="w", pady=4)
    sensitivity_scale = ttk.Scale(
        session_frame,
        from_=0.01,
        to=0.5,
        variable=sensitivity_var,
        orient="horizontal",
        length=160,
    )
    sensitivity_scale.grid(row=4, column=1, sticky="w")
    ttk.Label(session_frame, textvariable=sensitivity_label_var).grid(row=4, column=2, sticky="w")
    ttk.Label(session_frame, text="Higher = less sensitive").grid(
        row=5, column=0, columnspan=3, sticky="w"
    )

    ttk.Label(session_frame, text="Signal").grid(row=6, column=0, sticky="w", pady=(8, 0))
    meter = ttk.Progressbar(
        session_frame,
        style="Neo.Horizontal.TProgressbar",
        orient="horizontal",
        length=240,
        maximum=100,
        mode="determinate",
    )
    meter.grid(row=7, column=0, columnspan=3, sticky="we")

    reset_button = ttk.Button(session_frame, text="Reset")
    reset_button.grid(row=8, column=0, sticky="w", pady=(10, 0))
    ttk.Label(session_frame, textvariable=status_var).grid(
        row=9, column=0, columnspan=3, sticky="w", pady=(6, 0)
    )

    light_canvas = tk.Canvas(
        main, width=100, height=230, bg="#333333", highlightthickness=0
    )
    light_canvas.grid(row=0, column=1, padx=(16, 0), sticky="n")
    lights = {}
    for idx, pacing in enumerate((PacingLevel.GREEN, PacingLevel.YELLOW, PacingLevel.RED)):
        top = 15 + idx * 70
        lights[pacing] = light_canvas.create_oval(20, top, 80, top + 60, fill=LIGHT_DIM, width=0)

    def _set_status(text: str) -> None:
        status_var.set(text)
        logger.info(text)

    def _render(snapshot: MonitorSnapshot) -> None:
        timer_var.set(format_elapsed(snapshot.elapsed_ms))
        speaking_var.set("YES" if snapshot.speaking else "NO")
        meter["value"] = min(snapshot.level * 500, 100)
        for pacing, item in lights.items():
            color = LIGHT_COLORS[pacing] if pacing == snapshot.pacing else LIGHT_DIM
            light_canvas.itemconfigure(item, fill=color)

    monitor = SpeechMonitor(
        config,
        EnergySource.from_config(config),
        scheduler=root,
        on_update=_render,
    )
    _render(
        MonitorSnapshot(
            level=0.0,
            speaking=False,
            active=False,
            elapsed_ms=0.0,
            pacing_percent=0.0,
            pacing=PacingLevel.GREEN,
        )
    )

    def _read_fields() -> Config:
        try:
            target_ms = int(float(target_var.get()) * 1000)
            silence_ms = int(hold_var.get())
        except ValueError as exc:
            raise ConfigurationError(f"Not a number: {exc}") from exc
        return replace(
            monitor.config,
            threshold=round(float(sensitivity_var.get()), 2),
            silence_timeout_ms=silence_ms,
            target_duration_ms=target_ms,
        )

    def _apply_fields(_event=None) -> None:
        try:
            updated = _read_fields()
            monitor.apply_config(updated)
        except ConfigurationError as exc:
            status_var.set(str(exc))
            logger.debug("Rejected settings: %s", exc)
            return
        sensitivity_label_var.set(f"{updated.threshold:.2f}")
        save_config(config_path, updated)
        logger.debug("Settings saved to %s", config_path)

    def _on_reset() -> None:
        logger.info("Reset requested")
        monitor.reset_session()

    def _start_monitoring() -> None:
        try:
            monitor.start()
        except SourceUnavailable as exc:
            logger.exception("Monitor failed")
            _set_status(f"Could not access microphone: {exc}")
            return
        if config_error:
            _set_status("Microphone active (config reset to defaults)")
        else:
            _set_status("Microphone active")

    def _on_close() -> None:
        logger.info("GUI closing")
        monitor.stop()
        root.destroy()

    reset_button.configure(command=_on_reset)
    for entry in (target_entry, hold_entry):
        entry.bind("<Return>", _apply_fields)
        entry.bind("<FocusOut>", _apply_fields)
    sensitivity_scale.configure(command=lambda _value: _apply_fields())

    root.after(250, _start_monitoring)
    root.protocol("WM_DELETE_WINDOW", _on_close)
    root.mainloop()
