'''
-*- coding: utf-8 -*-
time: 2023/9/2 14:15
file: channels.py
author: Endy_Liu_Noonell
'''

import math
from collections import namedtuple

from .data import TRANS_X, TRANS_Y, TRANS_Z, ROT_X, ROT_Y, ROT_Z
from .errors import UnknownChannelError

ChannelSpec = namedtuple('ChannelSpec', ['joint_type', 'dir_idx', 'is_rotation', 'q_min', 'q_max'])

# Joint ranges are fixed, BVH files carry no limits
TRANSLATION_RANGE = (-1.0, 1.0)
ROTATION_RANGE = (-math.pi, math.pi)

CHANNEL_MAP = {
    'Xposition': ChannelSpec(TRANS_X, 0, False, *TRANSLATION_RANGE),
    'Yposition': ChannelSpec(TRANS_Y, 1, False, *TRANSLATION_RANGE),
    'Zposition': ChannelSpec(TRANS_Z, 2, False, *TRANSLATION_RANGE),
    'Xrotation': ChannelSpec(ROT_X, 0, True, *ROTATION_RANGE),
    'Yrotation': ChannelSpec(ROT_Y, 1, True, *ROTATION_RANGE),
    'Zrotation': ChannelSpec(ROT_Z, 2, True, *ROTATION_RANGE),
}

CHANNEL_LABELS = tuple(CHANNEL_MAP)


def map_channel(label, line=None):
    '''Maps a CHANNELS label such as "Yrotation" to its joint description'''
    try:
        return CHANNEL_MAP[label]
    except KeyError:
        raise UnknownChannelError('Unknown direction "%s" of CHANNELS' % label, line) from None


def joint_name(body_name, label):
    return '%s_jnt_%s' % (body_name, label)
