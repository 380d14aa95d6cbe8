'''
-*- coding: utf-8 -*-
time: 2023/9/4 16:52
file: visualization.py
author: Endy_Liu_Noonell
'''

import matplotlib.pyplot as plt
from mpl_toolkits.mplot3d import Axes3D  # 空间三维画图


def draw_tree(tree, q=None, ax=None, color='k'):
    '''Plots body origins and parent-child links of tree at joint values q'''
    if ax is None:
        fig = plt.figure()
        ax = fig.add_subplot(projection='3d')

    # the caller's tree stays in its current state
    positions = tree.clone().body_positions(q)
    for body in tree.traverse_bodies():
        p = positions[body.name]
        ax.scatter(p[0], p[1], p[2], color=color, s=8)
        for child in body.children:
            c = positions[child.name]
            ax.plot([p[0], c[0]], [p[1], c[1]], [p[2], c[2]], color=color)

    ax.set_xlabel('x')
    ax.set_ylabel('y')
    ax.set_zlabel('z')
    return ax
