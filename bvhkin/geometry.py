'''
-*- coding: utf-8 -*-
time: 2023/9/3 09:30
file: geometry.py
author: Endy_Liu_Noonell

Cosmetic shapes for a parsed skeleton. None of this affects the kinematics
'''

import logging

import numpy as np

from . import transforms as tr
from .data import Shape, SHAPE_FRAME, SHAPE_SPHERE, SHAPE_BOX

logger = logging.getLogger(__name__)

# Smallest link length used to size shapes
MIN_SHAPE_SIZE = 0.01
END_SITE_COLOR = 'BLACK_RUBBER'


def _shape_size(length):
    return max(0.8 * length, MIN_SHAPE_SIZE)


def random_color(rng):
    rr, gg, bb = rng.integers(0, 256, size=3)
    return '#%02x%02x%02xff' % (rr, gg, bb)


def create_frame_shape(scale):
    return Shape(SHAPE_FRAME, extents=(0.9, 0.9, 0.9), scale=scale)


def create_end_site_shape(offset):
    '''Sphere at the body origin, sized after the (already scaled) end site offset'''
    size = 0.1 * _shape_size(np.linalg.norm(offset))
    return Shape(SHAPE_SPHERE, extents=(size, size, size), color=END_SITE_COLOR)


def add_geometry(tree, rng=None):
    '''
    Adds a box from every body to each of its children and a sphere at the
    body origin. The tree's A_BI transforms must be current (see
    KinematicTree.set_state). One color is drawn per body from rng
    '''
    if rng is None:
        rng = np.random.default_rng()

    for body in tree.traverse_bodies():
        color = random_color(rng)

        for child in body.children:
            logger.debug('%s: Traversing child %s', body.name, child.name)

            K_p1 = tr.inv_transform_point(body.A_BI, body.A_BI[:3, 3])
            K_p2 = tr.inv_transform_point(body.A_BI, child.A_BI[:3, 3])
            K_p12 = K_p2 - K_p1
            K_center = K_p1 + 0.5 * K_p12
            length = _shape_size(np.linalg.norm(K_p12))

            A_CB = tr.rotation(tr.rotation_aligning(K_p12, 2))
            A_CB[:3, 3] = K_center
            body.add_shape(Shape(SHAPE_BOX, extents=(0.2 * length, 0.2 * length, length),
                                 color=color, A_CB=A_CB))

            size = 0.15 * length
            body.add_shape(Shape(SHAPE_SPHERE, extents=(size, size, size), color=color))
