'''
-*- coding: utf-8 -*-
time: 2023/9/2 11:02
file: transforms.py
author: Endy_Liu_Noonell

Homogeneous 4x4 transforms. A transform maps points of the child frame into
the parent frame: p_parent = A[:3, :3] @ p_child + A[:3, 3]
'''

import numpy as np
import transforms3d as t3d
from scipy.spatial.transform import Rotation as R

AXES = np.eye(3)


def identity():
    return np.identity(4)


def translation(offset):
    A = np.identity(4)
    A[:3, 3] = offset
    return A


def rotation(rot):
    A = np.identity(4)
    A[:3, :3] = rot
    return A


def euler_rotation(a, b, c, axes='rxyz'):
    '''Rotation matrix from intrinsic x-y-z Euler angles'''
    return t3d.euler.euler2mat(a, b, c, axes)


def joint_motion(joint_type, dir_idx, q):
    '''Transform produced by a single-axis joint at position q'''
    if joint_type.startswith('Rot'):
        return rotation(t3d.axangles.axangle2mat(AXES[dir_idx], q))
    return translation(AXES[dir_idx] * q)


def inv_transform_point(A, p):
    '''Express the parent-frame point p in the frame of A'''
    return A[:3, :3].T @ (np.asarray(p, dtype=float) - A[:3, 3])


def rotation_aligning(vec, dir_idx=2):
    '''
    Rotation matrix whose column dir_idx points along vec.
    Degenerate (zero length) vectors give the identity
    '''
    vec = np.asarray(vec, dtype=float)
    if np.linalg.norm(vec) < 1e-12:
        return np.identity(3)
    rot, _ = R.align_vectors(vec[np.newaxis, :], AXES[dir_idx][np.newaxis, :])
    return rot.as_matrix()
