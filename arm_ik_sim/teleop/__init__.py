"""
Keyboard teleoperation feeding the arbiter's manual input path.
"""
