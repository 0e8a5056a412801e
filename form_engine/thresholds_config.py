"""
Per-exercise tuning constants for the form evaluation engine.

ANGLE_THRESHOLDS  - pass windows for the form checks (degrees unless noted).
PHASE_THRESHOLDS  - forward/regression boundaries driving each phase machine.
FORM_TOLERANCES   - normalized-coordinate tolerances for positional checks.
EXERCISE_METADATA - display information for clients.
"""

ANGLE_THRESHOLDS = {
    "squat": {
        "knee_angle": {"min": 90, "max": 110},
        "back_straight": {"min": 150, "max": 180},
        "standing_knee": {"min": 160, "max": 180},
    },
    "pushup": {
        "elbow_angle": {"min": 80, "max": 100},
        "body_line": {"min": 170, "max": 180},
        "up_elbow": {"min": 160, "max": 180},
    },
    "armcurl": {
        "elbow_top": {"min": 30, "max": 50},
        "elbow_bottom": {"min": 150, "max": 180},
    },
    "sideraise": {
        "arm_elevation": {"min": 75, "max": 95},
        "symmetry_tolerance": 0.1,
    },
    "shoulderpress": {
        "elbow_top": {"min": 160, "max": 180},
        "elbow_bottom": {"min": 80, "max": 100},
    },
}

PHASE_THRESHOLDS = {
    "squat": {
        "start_descending": 140,
        "reach_bottom": 110,
        "start_ascending": 110,
        "reach_standing": 160,
    },
    "pushup": {
        "start_descending": 140,
        "reach_bottom": 100,
        "start_ascending": 100,
        "reach_up": 160,
    },
    "armcurl": {
        "start_curling": 140,
        "reach_top": 50,
        "start_lowering": 50,
        "reach_bottom": 160,
    },
    # Side raise is positional: elevation = shoulder.y - elbow.y (positive = raised)
    "sideraise": {
        "top_y": 0.05,
        "down_y": 0.15,
    },
    "shoulderpress": {
        "start_pressing": 120,
        "reach_top": 160,
        "start_lowering": 160,
        "reach_bottom": 90,
    },
}

FORM_TOLERANCES = {
    "knee_over_toe": 0.05,
    # Anti-momentum drift allowed for the curling elbow. Product-tunable.
    "elbow_movement": 0.05,
    "arm_elevation": 0.05,
}

EXERCISE_METADATA = {
    "squat": {
        "name": "Squat",
        "category": "lower_body",
        "difficulty": "beginner",
        "equipment": [],
        "recommended_camera_position": "side",
    },
    "pushup": {
        "name": "Push-up",
        "category": "chest",
        "difficulty": "beginner",
        "equipment": [],
        "recommended_camera_position": "side",
    },
    "armcurl": {
        "name": "Arm Curl",
        "category": "arms",
        "difficulty": "beginner",
        "equipment": ["dumbbell"],
        "recommended_camera_position": "front",
    },
    "sideraise": {
        "name": "Side Raise",
        "category": "shoulders",
        "difficulty": "intermediate",
        "equipment": ["dumbbell"],
        "recommended_camera_position": "front",
    },
    "shoulderpress": {
        "name": "Shoulder Press",
        "category": "shoulders",
        "difficulty": "intermediate",
        "equipment": ["dumbbell"],
        "recommended_camera_position": "front",
    },
}
