'''
-*- coding: utf-8 -*-
time: 2023/9/2 11:20
file: data.py
author: Endy_Liu_Noonell
'''

import copy

import numpy as np

from . import transforms as tr

TRANS_X = 'TransX'
TRANS_Y = 'TransY'
TRANS_Z = 'TransZ'
ROT_X = 'RotX'
ROT_Y = 'RotY'
ROT_Z = 'RotZ'

SHAPE_FRAME = 'FRAME'
SHAPE_SPHERE = 'SPHERE'
SHAPE_BOX = 'BOX'


class Shape():
    '''A drawable primitive attached to a body, without kinematic meaning'''

    def __init__(self, shape_type, extents=(0.0, 0.0, 0.0), scale=1.0, color=None, A_CB=None):
        self.type = shape_type
        self.extents = np.asarray(extents, dtype=float)
        self.scale = scale
        self.color = color
        self.A_CB = tr.identity() if A_CB is None else A_CB

    def __repr__(self):
        return 'Shape(%s, extents=%s, color=%s)' % (self.type, self.extents.tolist(), self.color)


class Joint():
    def __init__(self, name, joint_type, dir_idx, q_min, q_max, A_JP=None):
        self.name = name
        self.type = joint_type
        self.dir_idx = dir_idx
        self.q_min = q_min
        self.q_max = q_max
        self.q0 = 0.0
        # None means the joint sits at the origin of its predecessor
        self.A_JP = A_JP
        self.body = None
        self.index = -1

    @property
    def is_rotation(self):
        return self.type in (ROT_X, ROT_Y, ROT_Z)

    @property
    def origin(self):
        if self.A_JP is None:
            return np.zeros(3)
        return self.A_JP[:3, 3].copy()

    def __repr__(self):
        return 'Joint(%s, %s, index=%d)' % (self.name, self.type, self.index)


class Body():
    def __init__(self, name):
        self.name = name
        self.parent = None
        self.children = []
        self.joints = []
        self.shapes = []
        self.A_BP = tr.identity()
        self.A_BI = tr.identity()

    def add_shape(self, shape):
        self.shapes.append(shape)
        return shape

    @property
    def position(self):
        return self.A_BI[:3, 3].copy()

    def __repr__(self):
        return 'Body(%s, joints=%d, children=%d)' % (self.name, len(self.joints), len(self.children))


class KinematicTree():
    '''
    Bodies connected by single-axis joints.

    Bodies without a parent are top-level; the joints are numbered in
    insertion order, which is also the column order of a trajectory
    '''

    def __init__(self, file_name=None):
        self.file_name = file_name
        self.roots = []
        self._bodies = {}
        self._joints = []

    def __contains__(self, name):
        return name in self._bodies

    def __len__(self):
        return len(self._bodies)

    def insert_body(self, parent, body):
        if body.name in self._bodies:
            raise ValueError('Body "%s" already exists' % body.name)
        body.parent = parent
        if parent is None:
            self.roots.append(body)
        else:
            parent.children.append(body)
        self._bodies[body.name] = body
        return body

    def insert_joint(self, body, joint):
        if self._bodies.get(body.name) is not body:
            raise ValueError('Body "%s" is not part of this tree' % body.name)
        joint.body = body
        joint.index = len(self._joints)
        body.joints.append(joint)
        self._joints.append(joint)
        return joint

    def get_body(self, name):
        return self._bodies.get(name)

    @property
    def bodies(self):
        return list(self.traverse_bodies())

    @property
    def joints(self):
        return list(self._joints)

    @property
    def dof(self):
        return len(self._joints)

    @property
    def channel_ordering(self):
        return [(joint, joint.dir_idx) for joint in self._joints]

    @property
    def q0(self):
        return np.array([joint.q0 for joint in self._joints])

    def traverse_bodies(self):
        '''Depth first, children in declaration order'''
        stack = list(reversed(self.roots))
        while stack:
            body = stack.pop()
            yield body
            for c in reversed(body.children):
                stack.append(c)

    def traverse_joints(self):
        for body in self.traverse_bodies():
            for joint in body.joints:
                yield joint

    def set_state(self, q=None):
        '''Forward kinematics: updates A_BI of every body for joint values q'''
        if q is None:
            q = self.q0
        q = np.asarray(q, dtype=float)
        if q.shape != (self.dof,):
            raise ValueError('Expected %d joint values, got shape %s' % (self.dof, q.shape))

        for body in self.traverse_bodies():
            A = tr.identity() if body.parent is None else body.parent.A_BI
            for joint in body.joints:
                if joint.A_JP is not None:
                    A = A @ joint.A_JP
                A = A @ tr.joint_motion(joint.type, joint.dir_idx, q[joint.index])
            body.A_BI = A @ body.A_BP

    def body_positions(self, q=None):
        '''Returns {body name: world position} for joint values q'''
        self.set_state(q)
        return {body.name: body.position for body in self.traverse_bodies()}

    def clone(self):
        return copy.deepcopy(self)


class MotionData():
    def __init__(self, tree=None, values=None, frame_time=0.0, file_name=None):
        self.tree = tree
        self.values = values
        self.frame_time = frame_time
        self.file_name = file_name

    @property
    def n_frames(self):
        return 0 if self.values is None else self.values.shape[0]

    @property
    def framerate(self):
        return 1.0 / self.frame_time if self.frame_time > 0 else 0.0

    @property
    def channel_names(self):
        return [joint.name for joint in self.tree.joints]

    def clone(self):
        new_data = MotionData()
        new_data.tree = copy.deepcopy(self.tree)
        new_data.values = copy.deepcopy(self.values)
        new_data.frame_time = self.frame_time
        new_data.file_name = self.file_name
        return new_data

    def to_dataframe(self):
        '''Returns the trajectory as a pandas DataFrame indexed by time in seconds'''

        import pandas as pd
        time_index = np.arange(self.n_frames) * self.frame_time
        return pd.DataFrame(data=self.values, index=time_index, columns=self.channel_names)
