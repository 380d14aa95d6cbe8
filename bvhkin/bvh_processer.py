'''
-*- coding: utf-8 -*-
time: 2023/4/15 13:08
file: bvh_processer.py
author: Endy_Liu_Noonell

Post-processing of parsed tracks, using sci-kit's transformer API.
Every transformer takes a list of MotionData
'''

import logging

import numpy as np
import pandas as pd
from sklearn.base import BaseEstimator, TransformerMixin

from .data import MotionData

logger = logging.getLogger(__name__)


class MocapParameterizer_bvh(BaseEstimator, TransformerMixin):
    def __init__(self, param_type='joint'):
        '''

        param_type = {'joint', 'position'}
        '''
        self.param_type = param_type

    def fit(self, X, y=None):
        return self

    def transform(self, X, y=None):
        if self.param_type == 'joint':
            return X
        elif self.param_type == 'position':
            return self._to_pos(X)
        else:
            raise ValueError('param types: joint, position')

    def _to_pos(self, X):
        '''Converts joint values to body positions, one DataFrame per track'''

        Q = []
        for track in X:
            tree = track.tree.clone()
            bodies = tree.bodies
            positions = np.empty((track.n_frames, len(bodies), 3))
            for f, q in enumerate(track.values):
                tree.set_state(q)
                for b, body in enumerate(bodies):
                    positions[f, b] = body.A_BI[:3, 3]

            column_names = ['%s_%sposition' % (body.name, axis) for body in bodies for axis in 'XYZ']
            time_index = np.arange(track.n_frames) * track.frame_time
            Q.append(pd.DataFrame(data=positions.reshape(track.n_frames, -1),
                                  index=time_index, columns=column_names))

        return Q


class Numpyfier_bvh(BaseEstimator, TransformerMixin):
    '''
    Just converts the values in a MotionData object into a numpy array
    Useful for the final stage of a pipeline before training
    '''

    def __init__(self):
        pass

    def fit(self, X, y=None):
        self.org_mocap_ = X[0].clone()
        self.org_mocap_.values = self.org_mocap_.values[:0]

        return self

    def transform(self, X, y=None):
        Q = []

        for track in X:
            Q.append(track.values)

        return np.array(Q)

    def inverse_transform(self, X, copy=None):
        Q = []

        for track in X:
            new_mocap = self.org_mocap_.clone()
            new_mocap.values = np.asarray(track, dtype=float)

            Q.append(new_mocap)

        return Q


class DownSampler_bvh(BaseEstimator, TransformerMixin):
    def __init__(self, tgt_fps, keep_all=False):
        self.tgt_fps = tgt_fps
        self.keep_all = keep_all

    def fit(self, X, y=None):

        return self

    def transform(self, X, y=None):
        Q = []

        for track in X:
            orig_fps = round(track.framerate)
            rate = max(orig_fps // self.tgt_fps, 1)
            if orig_fps % self.tgt_fps != 0:
                logger.error('orig_fps (%d) is not dividable with tgt_fps (%d)', orig_fps, self.tgt_fps)

            for ii in range(0, rate):
                new_track = track.clone()
                new_track.values = track.values[ii::rate].copy()
                new_track.frame_time = track.frame_time * rate
                Q.append(new_track)
                if not self.keep_all:
                    break

        return Q

    def inverse_transform(self, X, copy=None):
        return X
