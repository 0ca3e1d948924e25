from .user import UserCreate, PublicRegister, UserLogin, UserUpdate, RoleUpdate, UserRef, UserOut
from .tokens import Token, RegisteredUser, MessageOut
from .project import ProjectCreate, ProjectUpdate, ProjectOut, ProjectRef, ClientContact, TeamMemberAdd, MilestoneCreate, MilestoneUpdate, MilestoneOut, DocumentOut
from .task import TaskCreate, TaskUpdate, TaskOut, TaskStatusUpdate, CommentCreate, CommentOut, AttachmentOut
