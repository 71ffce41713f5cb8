"""
transition.py
Linear cross-fade between successive dominant colors, one step per send.
"""
from utils import lerp_color


class ColorTransition:
    def __init__(self, steps=3):
        if int(steps) < 1:
            raise ValueError(f"steps must be >= 1, got {steps}")
        self.steps = int(steps)
        self.current = None  # last color handed out
        self.start = None
        self.target = None
        self.step = 0

    def reset(self):
        self.current = self.start = self.target = None
        self.step = 0

    def update(self, color):
        """
        Feed the newly sampled color and get the color to send this tick.
        A new target restarts the fade from whatever was sent last.
        """
        if self.current is None:
            self.current = self.start = self.target = color
            self.step = self.steps
            return color
        if color != self.target:
            self.start = self.current
            self.target = color
            self.step = 0
        if self.step < self.steps:
            self.step += 1
            self.current = lerp_color(self.start, self.target, self.step / self.steps)
        return self.current
