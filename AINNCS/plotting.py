from typing import NamedTuple, Optional, Tuple, Dict, List
import numpy as np
import sympy as sp
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle
import shapely.geometry as sg
import shapely.ops as so
from AINNCS.inclusion import NaturalInclusion
from AINNCS.specs import Predicate, SafetyPredicate, ReachabilityPredicate, AvoidPredicate

class PlotSpec (NamedTuple) :
    # 1-based state indices, 0 stands for time
    vars: Tuple[int, int] = (1, 2)
    # extra tag in the file name, e.g. 'close'
    tag: Optional[str] = None
    xlim: Optional[Tuple[float, float]] = None
    ylim: Optional[Tuple[float, float]] = None
    show_simulation: bool = True
    show_final: bool = False
    # (xlim, ylim) of a zoomed inset
    inset: Optional[Tuple[Tuple[float, float], Tuple[float, float]]] = None
    legend_loc: str = 'best'

    @property
    def axes (self) :
        return '-'.join('t' if v == 0 else f'x{v}' for v in self.vars)

    def filename (self, benchmark, scenario) :
        parts = [benchmark, scenario] + ([self.tag] if self.tag else []) + [self.axes]
        return '-'.join(p.replace(' ', '-') for p in parts) + '.png'

class ExprPlotSpec (NamedTuple) :
    # Bounds of expressions of the state over time
    name: str
    x_vars: List[sp.Symbol]
    exprs: Dict[str, sp.Expr]
    ylabel: str = ''

    def filename (self, benchmark, scenario) :
        return '-'.join(p.replace(' ', '-') for p in (benchmark, scenario, self.name)) + '.png'

sg_box = lambda _x, x_, xi=0, yi=1 : sg.box(_x[xi], _x[yi], x_[xi], x_[yi])
sg_boxes = lambda boxes, xi=0, yi=1 : [sg_box(_x, x_, xi, yi) for _x, x_ in boxes]

def draw_sg_union (ax, boxes, color='tab:blue', label=None, **kwargs) :
    shape = so.unary_union(boxes)
    polys = shape.geoms if hasattr(shape, 'geoms') else [shape]
    for poly in polys :
        xs, ys = poly.exterior.xy
        ax.fill(xs, ys, fc=color, ec=color, label=label, **kwargs)
        label = None

def draw_rs (ax, rs, tt, xi=0, yi=1, color='gold', label=None, max_steps=200, **kwargs) :
    tt = np.asarray(tt)
    stride = max(1, int(np.ceil(len(tt)/max_steps)))
    for t in tt[::stride] :
        draw_sg_union(ax, sg_boxes(rs.get_all(t), xi, yi), color, label, **kwargs)
        label = None

def draw_rs_t (ax, rs, tt, xi, color='gold', label=None) :
    bounds = [rs(t) for t in tt]
    _x = np.array([b[0][xi] for b in bounds]); x_ = np.array([b[1][xi] for b in bounds])
    ax.fill_between(tt, _x, x_, color=color, label=label)

def draw_iarray_t (ax, tt, _y, y_, color='tab:blue', label=None) :
    ax.plot(tt, _y, color=color, lw=0.75)
    ax.plot(tt, y_, color=color, lw=0.75)
    ax.fill_between(tt, _y, y_, color=color, alpha=0.25, label=label)

def plot_simulation (ax, trajs, tt, vars, color='black', **kwargs) :
    for traj in trajs :
        xx = traj(tt)
        xs = tt if vars[0] == 0 else xx[:,vars[0]-1]
        ax.plot(xs, xx[:,vars[1]-1], color=color, lw=0.75, **kwargs)

_set_styles = {
    ReachabilityPredicate : ('cyan', 'target states'),
    SafetyPredicate : ('lightgreen', 'safe states'),
    AvoidPredicate : ('salmon', 'unsafe states'),
}

def draw_predicate (ax, predicate:Predicate, vars, t_end) :
    if not isinstance(predicate, tuple(_set_styles)) :
        return
    color, label = _set_styles[type(predicate)]
    if vars[1] not in predicate.dims :
        return
    box = predicate.box
    _y, y_ = box.project([vars[1]]).low[0], box.project([vars[1]]).high[0]
    if vars[0] == 0 :
        t0, t1 = predicate.t_window if predicate.t_window is not None else (0, t_end)
        _x, x_ = t0, t1
    elif vars[0] in predicate.dims :
        _x, x_ = box.project([vars[0]]).low[0], box.project([vars[0]]).high[0]
    else :
        return
    x_inf = np.isinf(_x) or np.isinf(x_)
    y_inf = np.isinf(_y) or np.isinf(y_)
    if x_inf and y_inf :
        return
    if x_inf :
        ax.axhspan(_y, y_, color=color, alpha=0.5, label=label, zorder=0)
    elif y_inf :
        ax.axvspan(_x, x_, color=color, alpha=0.5, label=label, zorder=0)
    else :
        ax.add_patch(Rectangle((_x, _y), x_ - _x, y_ - _y, color=color, alpha=0.5, label=label, zorder=0))

def plot_reach (spec:PlotSpec, rs, trajs, tt, predicate:Predicate, t_end) :
    vars = spec.vars
    fig, ax = plt.subplots(1, 1, figsize=[6,5], dpi=100)
    ax.set_xlabel('t' if vars[0] == 0 else f'$x_{{{vars[0]}}}$')
    ax.set_ylabel(f'$x_{{{vars[1]}}}$')

    def draw (ax) :
        draw_predicate(ax, predicate, vars, t_end)
        if vars[0] == 0 :
            draw_rs_t(ax, rs, tt, vars[1]-1)
        else :
            draw_rs(ax, rs, tt, vars[0]-1, vars[1]-1)
        if spec.show_simulation :
            plot_simulation(ax, trajs, tt, vars)

    draw(ax)
    if spec.show_final and vars[0] != 0 :
        draw_sg_union(ax, sg_boxes(rs.get_all(tt[-1]), vars[0]-1, vars[1]-1), 'tab:orange',
                      label=f'reach set at t = {t_end:g}')
    if spec.inset is not None :
        axins = ax.inset_axes([0.4, 0.4, 0.3, 0.3])
        draw(axins)
        axins.set_xlim(spec.inset[0]); axins.set_ylim(spec.inset[1])
        ax.indicate_inset_zoom(axins, edgecolor='black')
    if spec.xlim is not None :
        ax.set_xlim(spec.xlim)
    if spec.ylim is not None :
        ax.set_ylim(spec.ylim)
    if ax.get_legend_handles_labels()[0] :
        ax.legend(loc=spec.legend_loc)
    return fig

def plot_exprs (spec:ExprPlotSpec, rs, trajs, tt) :
    fig, ax = plt.subplots(1, 1, figsize=[6,4], dpi=100)
    g_if = NaturalInclusion(spec.x_vars, list(spec.exprs.values()))
    bounds = np.array([g_if(*rs(t)) for t in tt])
    for i, label in enumerate(spec.exprs) :
        draw_iarray_t(ax, tt, bounds[:,0,i], bounds[:,1,i], color=f'C{i}', label=label)
    for traj in trajs :
        xx = traj(tt)
        gg = np.array([g_if(x, x)[0] for x in xx])
        for i in range(len(spec.exprs)) :
            ax.plot(tt, gg[:,i], color='black', lw=0.5)
    ax.set_xlabel('Time (s)')
    ax.set_ylabel(spec.ylabel)
    ax.legend()
    return fig

def save_figure (fig, path) :
    fig.savefig(path)
    plt.close(fig)
