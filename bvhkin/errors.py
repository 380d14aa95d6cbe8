'''
-*- coding: utf-8 -*-
time: 2023/9/2 10:41
file: errors.py
author: Endy_Liu_Noonell
'''


class BVHError(Exception):
    '''Base class of everything the BVH readers raise'''


class GrammarError(BVHError):
    '''
    A required token is missing or malformed.

    line is the 1-based line of the offending token, or None when unknown
    '''

    def __init__(self, message, line=None):
        if line is not None:
            message = '%s (line %d)' % (message, line)
        super().__init__(message)
        self.line = line


class UnknownChannelError(GrammarError):
    pass


class ExhaustionError(GrammarError):
    pass


class ShapeMismatchError(BVHError):
    pass
