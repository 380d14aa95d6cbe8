from .errors import BVHError, GrammarError, UnknownChannelError, ExhaustionError, ShapeMismatchError
from .data import Body, Joint, Shape, KinematicTree, MotionData
from .parsers import BVHScanner, BVHParser, TrajectoryParser, parse_hierarchy, parse_trajectory, load_bvh
