#!/usr/bin/env python3
"""
run.py — Launch obs-bridge without installing.

Usage (from the project directory):
    python run.py serve
    python run.py call obs_scene List
    python run.py call obs_recording Start -p path=D:/Recordings -p muteAudio=false
    python run.py check --password mypassword
    python run.py init-config
"""
import sys
from pathlib import Path

# Ensure the project root is on the path
sys.path.insert(0, str(Path(__file__).parent))

from obs_bridge.main import app

if __name__ == "__main__":
    app()
